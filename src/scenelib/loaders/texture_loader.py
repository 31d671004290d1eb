"""
Texture Loader

Reads texture sidecar files:

    name:String width:int32 height:int32 wrap:int32 filter:int32 type:String
    [Texture2D: mipmap_count:int32 png_path:String]
"""

from typing import Optional

from ..core.binary_reader import BinaryReader
from ..graphics.texture import Texture, to_filter_mode, to_wrap_mode
from .load_session import LoadSession

TEXTURE_2D = "Texture2D"


def read_texture(path: str, session: LoadSession) -> Optional[Texture]:
    """
    Load a texture through the session cache.

    Args:
        path: Data-root-relative path of the texture sidecar file
        session: Active load session

    Returns:
        Texture, or None if the file (or its image) is missing or the
        texture type is not supported
    """
    cache = session.cache
    if cache.contains(path):
        return cache.get(path)

    texture = None
    full_path = session.resolve(path)
    if full_path.exists():
        texture = _parse_texture(BinaryReader.from_file(full_path), session)
    else:
        print(f"    Warning: Texture not found: {full_path}")

    cache.put(path, texture)
    return texture


def _parse_texture(reader: BinaryReader, session: LoadSession) -> Optional[Texture]:
    name = reader.read_string()
    width = reader.read_int()
    height = reader.read_int()
    wrap_mode = to_wrap_mode(reader.read_int())
    filter_mode = to_filter_mode(reader.read_int())
    texture_type = reader.read_string()

    if texture_type != TEXTURE_2D:
        # Remaining type-specific bytes are left unread.
        session.unknown_tag("texture type", texture_type, reader.name)
        return None

    mipmap_count = reader.read_int()
    png_path = reader.read_string()

    pixels = session.texture_factory.load_texture_2d(
        session.resolve(png_path), filter_mode, wrap_mode, mipmap_count > 1
    )
    if pixels is None:
        return None

    session.log(f"    Texture: {name} ({width}x{height}, mipmaps={mipmap_count})")
    return Texture(
        name=name,
        width=width,
        height=height,
        wrap_mode=wrap_mode,
        filter_mode=filter_mode,
        mipmap_count=mipmap_count,
        pixels=pixels,
    )
