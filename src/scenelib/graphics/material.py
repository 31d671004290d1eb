"""
Material

Shader reference plus a named, typed property set.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterator, Optional, Tuple

import numpy as np
from pyrr import Vector4

from .texture import Texture


class MaterialPropertyType(IntEnum):
    """Property type tags as stored in material files."""
    COLOR = 0
    VECTOR = 1
    FLOAT = 2
    RANGE = 3
    TEXTURE = 4


@dataclass
class MaterialProperty:
    """Single named material property."""
    name: str
    type: MaterialPropertyType
    value: Any
    # Texture properties only: (scale_x, scale_y, offset_x, offset_y)
    uv_scale_offset: Optional[Vector4] = None


class Material:
    """
    Material with a shader and named properties.

    Supported property values:
    - Color: RGBA tuple
    - Vector: Vector4
    - Float/Range: float
    - Texture: Texture plus uv scale/offset
    """

    def __init__(self, shader, name: str = "Material"):
        """
        Initialize material.

        Args:
            shader: Shader object resolved from the shader registry
            name: Material name for debugging
        """
        self.shader = shader
        self.name = name
        self.properties: Dict[str, MaterialProperty] = {}

    def set_color(self, name: str, color: Tuple[float, float, float, float]):
        self.properties[name] = MaterialProperty(name, MaterialPropertyType.COLOR, tuple(float(c) for c in color))

    def set_vector(self, name: str, vector):
        self.properties[name] = MaterialProperty(name, MaterialPropertyType.VECTOR, Vector4(vector))

    def set_float(self, name: str, value: float, property_type: MaterialPropertyType = MaterialPropertyType.FLOAT):
        self.properties[name] = MaterialProperty(name, property_type, float(value))

    def set_texture(self, name: str, texture: Texture, uv_scale_offset=None):
        if uv_scale_offset is None:
            uv_scale_offset = (1.0, 1.0, 0.0, 0.0)
        self.properties[name] = MaterialProperty(
            name, MaterialPropertyType.TEXTURE, texture, Vector4(uv_scale_offset)
        )

    def get_property(self, name: str) -> Optional[MaterialProperty]:
        return self.properties.get(name)

    def _get_value(self, name: str, *types: MaterialPropertyType):
        prop = self.properties.get(name)
        if prop is None or prop.type not in types:
            return None
        return prop.value

    def get_color(self, name: str) -> Optional[Tuple[float, float, float, float]]:
        return self._get_value(name, MaterialPropertyType.COLOR)

    def get_vector(self, name: str) -> Optional[Vector4]:
        return self._get_value(name, MaterialPropertyType.VECTOR)

    def get_float(self, name: str) -> Optional[float]:
        return self._get_value(name, MaterialPropertyType.FLOAT, MaterialPropertyType.RANGE)

    def get_texture(self, name: str) -> Optional[Texture]:
        return self._get_value(name, MaterialPropertyType.TEXTURE)

    def textures(self) -> Iterator[MaterialProperty]:
        """Iterate texture properties in insertion order."""
        return (p for p in self.properties.values() if p.type == MaterialPropertyType.TEXTURE)

    def bind(self, program):
        """
        Write material properties to a shader program.

        Textures are bound to consecutive units in property order; their uv
        scale/offset goes to ``<name>_ST``.

        Args:
            program: ModernGL program (only uniforms present in it are written)
        """
        unit = 0
        for prop in self.properties.values():
            if prop.type == MaterialPropertyType.TEXTURE:
                if prop.value is None:
                    continue
                prop.value.use(location=unit)
                if prop.name in program:
                    program[prop.name].value = unit
                st_name = f"{prop.name}_ST"
                if st_name in program:
                    program[st_name].value = tuple(float(v) for v in prop.uv_scale_offset)
                unit += 1
            elif prop.name in program:
                if prop.type == MaterialPropertyType.VECTOR:
                    program[prop.name].value = tuple(np.asarray(prop.value, dtype='f4').tolist())
                else:
                    program[prop.name].value = prop.value

    def __repr__(self):
        return f"Material(name='{self.name}', properties={len(self.properties)})"
