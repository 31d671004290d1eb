"""
Instance Batch

Per-renderer accumulator of instance transforms and extra shader vectors.
Mutations only mark the batch dirty; the flat upload-ready buffer is rebuilt
once, the next time it is queried.
"""

from typing import List, Optional, Sequence

import numpy as np
from pyrr import Quaternion, Vector3, Vector4

from ..config.settings import INSTANCE_MATRIX_FLOATS, INSTANCE_VECTOR_FLOATS
from ..core.errors import InstanceLayoutError
from ..core.node import compose_trs, decompose_trs


class InstanceTransform:
    """One instance: TRS transform plus a fixed number of extra vectors."""

    def __init__(self, position, rotation, scale, vectors: Optional[List[Vector4]] = None):
        self.position = Vector3(position)
        self.rotation = Quaternion(rotation)
        self.scale = Vector3(scale)
        self.vectors: List[Vector4] = list(vectors) if vectors is not None else []

    def get_model_matrix(self) -> np.ndarray:
        return compose_trs(self.position, self.rotation, self.scale)

    def __repr__(self):
        return f"InstanceTransform(position={list(self.position)}, vectors={len(self.vectors)})"


class InstanceBatch:
    """
    Batch of instances drawn with one submission.

    Buffer layout per instance (float32):
    - 16 floats: model matrix, row-major with translation in row 3
      (read as column-major by GL)
    - 4 floats per extra vector slot

    Every instance in a batch has the same number of extra vectors. The count
    is fixed by the first call that supplies vectors (or by the constructor);
    instances added before that are padded with zero vectors.
    """

    def __init__(self, extra_vector_count: Optional[int] = None):
        """
        Initialize batch.

        Args:
            extra_vector_count: Extra vector slots per instance (None = set by first use)
        """
        self.instances: List[InstanceTransform] = []
        self._extra_vector_count: Optional[int] = None
        self._buffer = np.zeros((0, INSTANCE_MATRIX_FLOATS), dtype='f4')
        self._dirty = False

        # Number of buffer rebuilds performed (diagnostics)
        self.rebuild_count = 0

        if extra_vector_count is not None:
            self._establish_layout(extra_vector_count)

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    @property
    def extra_vector_count(self) -> int:
        return self._extra_vector_count or 0

    @property
    def layout_fixed(self) -> bool:
        return self._extra_vector_count is not None

    @property
    def floats_per_instance(self) -> int:
        return INSTANCE_MATRIX_FLOATS + INSTANCE_VECTOR_FLOATS * self.extra_vector_count

    @property
    def stride(self) -> int:
        """Bytes per instance in the flat buffer."""
        return self.floats_per_instance * 4

    @property
    def instance_count(self) -> int:
        return len(self.instances)

    @property
    def dirty(self) -> bool:
        return self._dirty

    def _establish_layout(self, count: int):
        if count < 0:
            raise InstanceLayoutError(f"Extra vector count must be non-negative, got {count}")
        if self._extra_vector_count is None:
            self._extra_vector_count = count
            for instance in self.instances:
                instance.vectors = [Vector4([0.0, 0.0, 0.0, 0.0]) for _ in range(count)]
        elif self._extra_vector_count != count:
            raise InstanceLayoutError(
                f"Batch uses {self._extra_vector_count} extra vectors per instance, got {count}"
            )

    def _mark_dirty(self):
        self._dirty = True

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_instance(self, position, rotation, scale, vectors: Optional[Sequence] = None) -> int:
        """
        Append an instance.

        Returns:
            Index of the new instance
        """
        if vectors is not None:
            self._establish_layout(len(vectors))
            extra = [Vector4(v) for v in vectors]
        else:
            extra = [Vector4([0.0, 0.0, 0.0, 0.0]) for _ in range(self.extra_vector_count)]

        self.instances.append(InstanceTransform(position, rotation, scale, extra))
        self._mark_dirty()
        return len(self.instances) - 1

    def _instance(self, index: int) -> InstanceTransform:
        if not 0 <= index < len(self.instances):
            raise IndexError(f"Instance {index} out of range (batch has {len(self.instances)})")
        return self.instances[index]

    def set_instance_transform(self, index: int, position, rotation, scale):
        instance = self._instance(index)
        instance.position = Vector3(position)
        instance.rotation = Quaternion(rotation)
        instance.scale = Vector3(scale)
        self._mark_dirty()

    def set_instance_extra_vector(self, index: int, vector_index: int, vector):
        """
        Overwrite one extra vector slot of one instance.

        Raises:
            InstanceLayoutError: If no layout is fixed or the slot is out of range
        """
        if not self.layout_fixed:
            raise InstanceLayoutError("Extra vector layout has not been established for this batch")
        if not 0 <= vector_index < self._extra_vector_count:
            raise InstanceLayoutError(
                f"Vector slot {vector_index} out of range (batch has {self._extra_vector_count})"
            )
        self._instance(index).vectors[vector_index] = Vector4(vector)
        self._mark_dirty()

    def set_model_matrix(self, matrix):
        """
        Apply a model matrix as the implicit single instance.

        Creates instance 0 if the batch is empty, otherwise overwrites its
        transform.
        """
        position, rotation, scale = decompose_trs(matrix)
        if not self.instances:
            self.add_instance(position, rotation, scale)
        else:
            self.set_instance_transform(0, position, rotation, scale)

    def set_vector_array(self, vectors: Sequence):
        """Copy the same vector array into every instance's extra slots."""
        self._establish_layout(len(vectors))
        array = [Vector4(v) for v in vectors]
        for instance in self.instances:
            instance.vectors = [Vector4(v) for v in array]
        self._mark_dirty()

    def clear(self):
        """Remove all instances; the extra vector layout is kept."""
        self.instances.clear()
        self._mark_dirty()

    # ------------------------------------------------------------------
    # Buffer
    # ------------------------------------------------------------------

    def get_buffer(self) -> np.ndarray:
        """
        Flat float32 instance data, shape (instance_count, floats_per_instance).

        Rebuilt only if the batch changed since the last call.
        """
        if self._dirty:
            self._rebuild()
        return self._buffer

    def _rebuild(self):
        data = np.zeros((len(self.instances), self.floats_per_instance), dtype='f4')
        for i, instance in enumerate(self.instances):
            data[i, :INSTANCE_MATRIX_FLOATS] = np.asarray(instance.get_model_matrix(), dtype='f4').reshape(-1)
            if instance.vectors:
                data[i, INSTANCE_MATRIX_FLOATS:] = np.asarray(instance.vectors, dtype='f4').reshape(-1)

        self._buffer = data
        self._dirty = False
        self.rebuild_count += 1

    def __repr__(self):
        return (f"InstanceBatch(instances={len(self.instances)}, "
                f"extra_vectors={self.extra_vector_count}, dirty={self._dirty})")
