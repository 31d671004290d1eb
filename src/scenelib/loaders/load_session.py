"""
Load Session

Context passed through every reader during one top-level scene load: the
data root, the resource cache, and the external collaborators that build
meshes, textures and shaders.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

from ..config.settings import DEBUG_ASSET_LOADING, STRICT_TAG_DECODING
from ..core.errors import UnknownTagError
from ..graphics.mesh import load_mesh_reference
from ..graphics.shader import ShaderRegistry
from ..graphics.texture import PillowTextureFactory
from .resource_cache import ResourceCache


@dataclass
class LoadSession:
    """State shared by the readers of one load."""

    data_root: Path
    shaders: ShaderRegistry = field(default_factory=ShaderRegistry)
    mesh_loader: Callable[[Path], Any] = load_mesh_reference
    texture_factory: Any = field(default_factory=PillowTextureFactory)
    cache: ResourceCache = field(default_factory=ResourceCache)
    strict: bool = STRICT_TAG_DECODING
    verbose: bool = DEBUG_ASSET_LOADING

    def __post_init__(self):
        self.data_root = Path(self.data_root)

    def resolve(self, path: str) -> Path:
        """Full path of a data-root-relative asset path."""
        return self.data_root / path

    def unknown_tag(self, kind: str, tag, source: str = ""):
        """
        Handle a tag with no known payload layout.

        Raises:
            UnknownTagError: In strict mode
        """
        if self.strict:
            raise UnknownTagError(kind, tag, source)
        where = f" in {source}" if source else ""
        print(f"  Warning: Skipping unknown {kind} tag {tag!r}{where}; following data may be misaligned")

    def log(self, message: str):
        if self.verbose:
            print(message)

    def find_shader(self, name: str) -> Optional[Any]:
        return self.shaders.find(name)
