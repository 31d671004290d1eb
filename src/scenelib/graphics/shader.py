"""
Shader Registry

Name-keyed lookup of compiled shaders. Materials resolve their shader by
name through a registry when they are loaded.
"""

from typing import Any, Dict, Optional


class ShaderRegistry:
    """Maps shader names to shader objects (e.g. ``moderngl.Program``)."""

    def __init__(self, shaders: Optional[Dict[str, Any]] = None):
        self._shaders: Dict[str, Any] = dict(shaders or {})

    def register(self, name: str, shader: Any):
        self._shaders[name] = shader

    def find(self, name: str) -> Optional[Any]:
        """Return the shader registered under ``name``, or None."""
        return self._shaders.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._shaders

    def __len__(self) -> int:
        return len(self._shaders)
