"""
Renderer Components

Mesh renderers and skinned mesh renderers attached to scene nodes. Each
renderer owns an InstanceBatch used when it is drawn with many transforms.
"""

import weakref
from typing import Any, Dict, List, Optional, Sequence

import moderngl
import numpy as np

from ..config.settings import MODEL_MATRIX_NAME
from ..core.node import Component, Node
from .instance_batch import InstanceBatch
from .material import Material


class Renderer(Component):
    """
    Base renderer.

    Holds an ordered material list (one slot per submesh; a slot may be None
    when its material failed to load) and the instance batch.
    """

    type_name = "Renderer"

    def __init__(self):
        super().__init__()
        self.materials: List[Optional[Material]] = []
        self.instances = InstanceBatch()

        # Named values most recently pushed through the instance API
        self.instance_uniforms: Dict[str, Any] = {}

        self._instance_buffer: Optional[moderngl.Buffer] = None
        self._uploaded_rebuild = -1

    @property
    def material(self) -> Optional[Material]:
        """First assigned material (None if there is none)."""
        return next((m for m in self.materials if m is not None), None)

    def set_material(self, material: Optional[Material]):
        """Replace the material list with a single material."""
        self.materials = [material]

    def set_materials(self, materials: Sequence[Optional[Material]]):
        self.materials = list(materials)

    def add_material(self, material: Optional[Material]):
        self.materials.append(material)

    # ------------------------------------------------------------------
    # Instancing
    # ------------------------------------------------------------------

    def add_instance(self, position, rotation, scale, vectors=None) -> int:
        return self.instances.add_instance(position, rotation, scale, vectors)

    def set_instance_transform(self, index: int, position, rotation, scale):
        self.instances.set_instance_transform(index, position, rotation, scale)

    def set_instance_extra_vector(self, index: int, vector_index: int, vector):
        self.instances.set_instance_extra_vector(index, vector_index, vector)

    def get_instance_count(self) -> int:
        return self.instances.instance_count

    def get_instance_stride(self) -> int:
        return self.instances.stride

    def set_instance_matrix(self, name: str, matrix):
        """
        Set a named matrix. The model matrix becomes the implicit instance.
        """
        self.instance_uniforms[name] = np.array(matrix, dtype='f4')
        if name == MODEL_MATRIX_NAME:
            self.instances.set_model_matrix(matrix)

    def set_instance_vector_array(self, name: str, vectors: Sequence):
        """Set a named vector array on every instance."""
        self.instance_uniforms[name] = np.array(vectors, dtype='f4')
        self.instances.set_vector_array(vectors)

    def get_instance_buffer(self, ctx: Optional[moderngl.Context] = None):
        """
        Return instance data ready for drawing.

        Args:
            ctx: ModernGL context. When given, the data is uploaded into a
                 GPU buffer (re-uploaded only after a rebuild).

        Returns:
            moderngl.Buffer if ctx was given, else the float32 array
        """
        data = self.instances.get_buffer()
        if ctx is None:
            return data

        if self._uploaded_rebuild == self.instances.rebuild_count and self._instance_buffer is not None:
            return self._instance_buffer

        raw = data.tobytes()
        if self._instance_buffer is None or self._instance_buffer.size < len(raw):
            if self._instance_buffer is not None:
                self._instance_buffer.release()
            self._instance_buffer = ctx.buffer(reserve=max(len(raw), 1), dynamic=True)
        if raw:
            self._instance_buffer.write(raw)
        self._uploaded_rebuild = self.instances.rebuild_count
        return self._instance_buffer

    def release(self):
        """Release GPU resources"""
        if self._instance_buffer is not None:
            self._instance_buffer.release()
            self._instance_buffer = None
            self._uploaded_rebuild = -1


class MeshRenderer(Renderer):
    """Renders one mesh with one material per submesh."""

    type_name = "MeshRenderer"

    def __init__(self):
        super().__init__()
        self.mesh = None

    def set_mesh(self, mesh):
        self.mesh = mesh

    def __repr__(self):
        return f"{type(self).__name__}(mesh={self.mesh}, materials={len(self.materials)})"


class SkinnedMeshRenderer(MeshRenderer):
    """
    Mesh renderer deformed by a bone hierarchy.

    Bones are stored as slash-separated paths relative to the bones root and
    resolved to nodes on first use, once the whole tree exists.
    """

    type_name = "SkinnedMeshRenderer"

    def __init__(self):
        super().__init__()
        self.bone_paths: List[str] = []
        self._bones_root_ref: Optional[weakref.ref] = None
        self._bones: Optional[List[Optional[Node]]] = None

    @property
    def bones_root(self) -> Optional[Node]:
        return self._bones_root_ref() if self._bones_root_ref is not None else None

    def set_bones_root(self, node: Optional[Node]):
        self._bones_root_ref = weakref.ref(node) if node is not None else None
        self._bones = None

    def set_bone_paths(self, paths: Sequence[str]):
        self.bone_paths = list(paths)
        self._bones = None

    @property
    def bones_resolved(self) -> bool:
        return self._bones is not None

    def resolve_bones(self) -> List[Optional[Node]]:
        """
        Resolve bone paths against the bones root.

        The result is memoised until the paths or the root change. Paths that
        do not match a node resolve to None.
        """
        if self._bones is None:
            root = self.bones_root
            if root is None:
                self._bones = [None] * len(self.bone_paths)
            else:
                self._bones = [root.find(path) for path in self.bone_paths]
        return self._bones

    def __repr__(self):
        return f"SkinnedMeshRenderer(mesh={self.mesh}, bones={len(self.bone_paths)})"
