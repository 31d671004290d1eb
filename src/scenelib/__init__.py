"""
SceneLib - Binary Scene Loading and Instanced Rendering

Decodes binary scene files into node trees with mesh renderer, skinned mesh
renderer and animation components, and batches per-instance transforms for
instanced draws.
"""

# Configuration
from .config.settings import *

# Core
from .core import (
    Node,
    Component,
    BinaryReader,
    SceneDecodeError,
    TruncatedStreamError,
    DuplicateComponentError,
    UnknownTagError,
    InstanceLayoutError,
)

# Graphics
from .graphics import (
    Texture,
    Material,
    ShaderRegistry,
    InstanceBatch,
    Renderer,
    MeshRenderer,
    SkinnedMeshRenderer,
)

# Animation
from .animation import Animation, AnimationClip

# Loaders
from .loaders import Resources, ResourceCache, LoadSession

__version__ = "0.1.0"
__all__ = [
    # Core
    "Node",
    "Component",
    "BinaryReader",
    "SceneDecodeError",
    "TruncatedStreamError",
    "DuplicateComponentError",
    "UnknownTagError",
    "InstanceLayoutError",
    # Graphics
    "Texture",
    "Material",
    "ShaderRegistry",
    "InstanceBatch",
    "Renderer",
    "MeshRenderer",
    "SkinnedMeshRenderer",
    # Animation
    "Animation",
    "AnimationClip",
    # Loaders
    "Resources",
    "ResourceCache",
    "LoadSession",
]
