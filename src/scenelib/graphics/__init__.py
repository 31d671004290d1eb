"""Rendering-facing resource types"""
from .texture import Texture, FilterMode, SamplerAddressMode, PillowTextureFactory
from .material import Material, MaterialProperty, MaterialPropertyType
from .shader import ShaderRegistry
from .mesh import MeshReference, load_mesh_reference
from .instance_batch import InstanceBatch, InstanceTransform
from .renderer import Renderer, MeshRenderer, SkinnedMeshRenderer

__all__ = [
    "Texture",
    "FilterMode",
    "SamplerAddressMode",
    "PillowTextureFactory",
    "Material",
    "MaterialProperty",
    "MaterialPropertyType",
    "ShaderRegistry",
    "MeshReference",
    "load_mesh_reference",
    "InstanceBatch",
    "InstanceTransform",
    "Renderer",
    "MeshRenderer",
    "SkinnedMeshRenderer",
]
