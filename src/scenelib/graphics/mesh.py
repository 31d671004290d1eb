"""
Mesh References

Meshes are built by an external loader; scene files only name them by path.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class MeshReference:
    """Handle to a mesh file awaiting GPU upload by the rendering layer."""
    path: Path

    @property
    def name(self) -> str:
        return self.path.stem


def load_mesh_reference(path: Path) -> Optional[MeshReference]:
    """Default mesh loader: a reference to the file, or None if it is missing."""
    path = Path(path)
    if not path.exists():
        print(f"    Warning: Mesh not found: {path}")
        return None
    return MeshReference(path)
