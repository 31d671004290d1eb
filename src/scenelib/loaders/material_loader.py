"""
Material Loader

Reads material sidecar files:

    name:String shader_name:String prop_count:int32 Property*
    Property := name:String type:int32 payload

Payload widths: Color/Vector 4 floats, Float/Range 1 float,
Texture 4 floats (uv scale/offset) + texture path String.
"""

from typing import Optional

from ..core.binary_reader import BinaryReader
from ..graphics.material import Material, MaterialPropertyType
from .load_session import LoadSession
from .texture_loader import read_texture


def read_material(path: str, session: LoadSession) -> Optional[Material]:
    """
    Load a material through the session cache.

    The whole file is always consumed, even when the shader cannot be
    resolved (in which case None is returned and cached).

    Args:
        path: Data-root-relative path of the material file
        session: Active load session

    Returns:
        Material, or None if the file is missing or its shader is unknown
    """
    cache = session.cache
    if cache.contains(path):
        return cache.get(path)

    material = None
    full_path = session.resolve(path)
    if full_path.exists():
        material = _parse_material(BinaryReader.from_file(full_path), session)
    else:
        print(f"    Warning: Material not found: {full_path}")

    cache.put(path, material)
    return material


def _parse_material(reader: BinaryReader, session: LoadSession) -> Optional[Material]:
    material_name = reader.read_string()
    shader_name = reader.read_string()
    property_count = reader.read_int()

    material = None
    shader = session.find_shader(shader_name)
    if shader is not None:
        material = Material(shader, name=material_name)
    else:
        print(f"    Warning: Shader '{shader_name}' not found for material '{material_name}'")

    session.log(f"  Material: {material_name} (shader={shader_name}, properties={property_count})")

    for _ in range(property_count):
        property_name = reader.read_string()
        property_type = reader.read_int()

        if property_type == MaterialPropertyType.COLOR:
            value = reader.read_color()
            if material is not None:
                material.set_color(property_name, value)
        elif property_type == MaterialPropertyType.VECTOR:
            value = reader.read_vector4()
            if material is not None:
                material.set_vector(property_name, value)
        elif property_type in (MaterialPropertyType.FLOAT, MaterialPropertyType.RANGE):
            value = reader.read_float()
            if material is not None:
                material.set_float(property_name, value, MaterialPropertyType(property_type))
        elif property_type == MaterialPropertyType.TEXTURE:
            uv_scale_offset = reader.read_vector4()
            texture_path = reader.read_string()
            if texture_path:
                texture = read_texture(texture_path, session)
                if material is not None and texture is not None:
                    material.set_texture(property_name, texture, uv_scale_offset)
        else:
            # No known payload width: the rest of the file cannot be trusted.
            session.unknown_tag("material property type", property_type, reader.name)
            break

    return material
