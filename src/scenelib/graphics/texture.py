"""
Texture

Texture descriptors loaded from texture sidecar files, and the Pillow/ModernGL
factory that turns a PNG path into pixel data.
"""

from enum import IntEnum
from pathlib import Path
from typing import Any, Optional

import moderngl
from PIL import Image

from ..config.settings import DEBUG_ASSET_LOADING, DEFAULT_TEXTURE_COMPONENTS


class SamplerAddressMode(IntEnum):
    """Texture wrap modes."""
    REPEAT = 0
    CLAMP = 1
    MIRROR = 2
    MIRROR_ONCE = 3


class FilterMode(IntEnum):
    """Texture filter modes."""
    NEAREST = 0
    LINEAR = 1
    TRILINEAR = 2


class Texture:
    """
    Texture descriptor.

    Holds the sampling parameters read from the sidecar file plus a handle
    to the pixel data produced by the texture factory (a ``moderngl.Texture``
    when a context is available, otherwise a decoded Pillow image).
    """

    def __init__(
        self,
        name: str = "Texture",
        width: int = 0,
        height: int = 0,
        wrap_mode: SamplerAddressMode = SamplerAddressMode.REPEAT,
        filter_mode: FilterMode = FilterMode.LINEAR,
        mipmap_count: int = 1,
        pixels: Any = None,
    ):
        self.name = name
        self.width = width
        self.height = height
        self.wrap_mode = wrap_mode
        self.filter_mode = filter_mode
        self.mipmap_count = mipmap_count
        self.pixels = pixels

    @property
    def has_mipmaps(self) -> bool:
        return self.mipmap_count > 1

    def use(self, location: int = 0):
        """Bind the GPU texture to a texture unit (no-op for CPU pixels)."""
        if isinstance(self.pixels, moderngl.Texture):
            self.pixels.use(location=location)

    def release(self):
        """Release GPU resources"""
        if isinstance(self.pixels, moderngl.Texture):
            self.pixels.release()
        self.pixels = None

    def __repr__(self):
        return (f"Texture(name='{self.name}', size={self.width}x{self.height}, "
                f"wrap={self.wrap_mode.name}, filter={self.filter_mode.name}, mipmaps={self.mipmap_count})")


def _coerce(enum_type, value, default):
    try:
        return enum_type(value)
    except ValueError:
        return default


def to_wrap_mode(value: int) -> SamplerAddressMode:
    return _coerce(SamplerAddressMode, value, SamplerAddressMode.REPEAT)


def to_filter_mode(value: int) -> FilterMode:
    return _coerce(FilterMode, value, FilterMode.LINEAR)


class PillowTextureFactory:
    """
    Loads Texture2D pixel data from image files.

    Decodes with Pillow and, when a ModernGL context is available, uploads
    to a GPU texture with filtering and wrap state taken from the
    descriptor. Mipmaps are only built when requested.
    """

    def __init__(self, ctx: Optional[moderngl.Context] = None):
        """
        Initialize factory.

        Args:
            ctx: ModernGL context (None keeps decoded images on the CPU)
        """
        self.ctx = ctx

    def load_texture_2d(self, path: Path, filter_mode: FilterMode,
                        wrap_mode: SamplerAddressMode, mipmaps: bool):
        """
        Load pixel data for a 2D texture.

        Args:
            path: Full path to the image file
            filter_mode: Sampling filter
            wrap_mode: Address mode for both axes
            mipmaps: Build a mip chain

        Returns:
            moderngl.Texture, PIL.Image.Image, or None if the file is missing
        """
        path = Path(path)
        if not path.exists():
            print(f"    Warning: Texture image not found: {path}")
            return None

        img = Image.open(path).convert('RGBA')
        if self.ctx is None:
            return img

        tex = self.ctx.texture(img.size, DEFAULT_TEXTURE_COMPONENTS, img.tobytes())
        if mipmaps:
            tex.build_mipmaps()

        if filter_mode == FilterMode.NEAREST:
            tex.filter = (moderngl.NEAREST_MIPMAP_NEAREST if mipmaps else moderngl.NEAREST, moderngl.NEAREST)
        elif filter_mode == FilterMode.TRILINEAR and mipmaps:
            tex.filter = (moderngl.LINEAR_MIPMAP_LINEAR, moderngl.LINEAR)
        else:
            tex.filter = (moderngl.LINEAR_MIPMAP_NEAREST if mipmaps else moderngl.LINEAR, moderngl.LINEAR)

        repeat = wrap_mode in (SamplerAddressMode.REPEAT, SamplerAddressMode.MIRROR)
        tex.repeat_x = repeat
        tex.repeat_y = repeat

        if DEBUG_ASSET_LOADING:
            print(f"    Texture: {path.name} {img.size[0]}x{img.size[1]} mipmaps={mipmaps}")

        return tex
