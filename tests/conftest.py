"""Shared fixtures for loader tests"""

import pytest

from scene_bytes import RecordingTextureFactory
from src.scenelib.graphics.shader import ShaderRegistry
from src.scenelib.loaders.load_session import LoadSession


@pytest.fixture
def write_asset(tmp_path):
    """Write bytes under the temporary data root and return the relative path."""

    def _write(relative_path, data):
        full_path = tmp_path / relative_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_bytes(data)
        return relative_path

    return _write


@pytest.fixture
def shaders():
    return ShaderRegistry({"Standard": "standard-program", "Skin": "skin-program"})


@pytest.fixture
def texture_factory():
    return RecordingTextureFactory()


@pytest.fixture
def session(tmp_path, shaders, texture_factory):
    return LoadSession(
        data_root=tmp_path,
        shaders=shaders,
        mesh_loader=lambda path: ("mesh", path.name),
        texture_factory=texture_factory,
    )
