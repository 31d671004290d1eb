"""Loaders for binary scene, material and texture files."""

from .resource_cache import ResourceCache
from .load_session import LoadSession
from .texture_loader import read_texture
from .material_loader import read_material
from .component_reader import read_component
from .scene_reader import Resources, read_node

__all__ = [
    'ResourceCache',
    'LoadSession',
    'read_texture',
    'read_material',
    'read_component',
    'read_node',
    'Resources',
]
