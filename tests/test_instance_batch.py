"""Tests for InstanceBatch and renderer instancing"""

import numpy as np
import pytest
from pyrr import Matrix44

from src.scenelib.config.settings import MODEL_MATRIX_NAME
from src.scenelib.core.errors import InstanceLayoutError
from src.scenelib.core.node import compose_trs
from src.scenelib.graphics.instance_batch import InstanceBatch
from src.scenelib.graphics.renderer import MeshRenderer

IDENTITY = (0.0, 0.0, 0.0, 1.0)
ONE = (1.0, 1.0, 1.0)


def test_empty_batch():
    """A fresh batch has no instances and an empty buffer"""
    batch = InstanceBatch()

    assert batch.instance_count == 0
    assert batch.get_buffer().shape == (0, 16)
    assert batch.rebuild_count == 0


def test_many_mutations_one_rebuild():
    """N mutations followed by one query rebuild exactly once"""
    batch = InstanceBatch()
    for i in range(50):
        batch.add_instance((float(i), 0.0, 0.0), IDENTITY, ONE)
    for i in range(50):
        batch.set_instance_transform(i, (0.0, float(i), 0.0), IDENTITY, ONE)

    assert batch.rebuild_count == 0
    data = batch.get_buffer()

    assert batch.rebuild_count == 1
    assert data.shape == (50, 16)
    assert np.allclose(data[49, 12:15], [0.0, 49.0, 0.0])


def test_query_without_mutation_does_no_work():
    """Clean batches return the cached buffer"""
    batch = InstanceBatch()
    batch.add_instance((1.0, 2.0, 3.0), IDENTITY, ONE)

    first = batch.get_buffer()
    second = batch.get_buffer()

    assert batch.rebuild_count == 1
    assert second is first
    assert not batch.dirty


def test_buffer_layout_matches_model_matrix():
    """Each row is the flattened model matrix followed by extra vectors"""
    batch = InstanceBatch()
    batch.add_instance((1.0, 2.0, 3.0), IDENTITY, (2.0, 2.0, 2.0), vectors=[(9.0, 8.0, 7.0, 6.0)])

    row = batch.get_buffer()[0]
    expected = compose_trs((1.0, 2.0, 3.0), IDENTITY, (2.0, 2.0, 2.0))

    assert batch.stride == (16 + 4) * 4
    assert np.allclose(row[:16], np.asarray(expected).reshape(-1))
    assert np.allclose(row[16:], [9.0, 8.0, 7.0, 6.0])


def test_extra_vector_count_is_fixed_by_first_use():
    """Mixed extra-vector counts are rejected"""
    batch = InstanceBatch()
    batch.add_instance((0.0, 0.0, 0.0), IDENTITY, ONE, vectors=[(1.0, 0.0, 0.0, 0.0), (0.0, 1.0, 0.0, 0.0)])

    assert batch.extra_vector_count == 2
    with pytest.raises(InstanceLayoutError):
        batch.add_instance((0.0, 0.0, 0.0), IDENTITY, ONE, vectors=[(1.0, 0.0, 0.0, 0.0)])
    with pytest.raises(InstanceLayoutError):
        batch.set_vector_array([(1.0, 1.0, 1.0, 1.0)])


def test_earlier_instances_padded_when_layout_is_established():
    """Instances added before the layout get zero vectors"""
    batch = InstanceBatch()
    batch.add_instance((0.0, 0.0, 0.0), IDENTITY, ONE)
    batch.add_instance((0.0, 0.0, 0.0), IDENTITY, ONE, vectors=[(1.0, 2.0, 3.0, 4.0)])

    data = batch.get_buffer()

    assert data.shape == (2, 20)
    assert np.allclose(data[0, 16:], 0.0)
    assert np.allclose(data[1, 16:], [1.0, 2.0, 3.0, 4.0])


def test_set_extra_vector():
    """Single slot writes need an established layout and a valid slot"""
    batch = InstanceBatch()
    batch.add_instance((0.0, 0.0, 0.0), IDENTITY, ONE)

    with pytest.raises(InstanceLayoutError):
        batch.set_instance_extra_vector(0, 0, (1.0, 1.0, 1.0, 1.0))

    batch = InstanceBatch(extra_vector_count=1)
    batch.add_instance((0.0, 0.0, 0.0), IDENTITY, ONE)
    batch.get_buffer()
    batch.set_instance_extra_vector(0, 0, (5.0, 5.0, 5.0, 5.0))

    assert batch.dirty
    assert np.allclose(batch.get_buffer()[0, 16:], 5.0)
    assert batch.rebuild_count == 2
    with pytest.raises(InstanceLayoutError):
        batch.set_instance_extra_vector(0, 1, (5.0, 5.0, 5.0, 5.0))


def test_vector_array_splats_across_instances():
    """The same vector array is written into every instance"""
    batch = InstanceBatch()
    for _ in range(3):
        batch.add_instance((0.0, 0.0, 0.0), IDENTITY, ONE)

    batch.set_vector_array([(1.0, 0.0, 0.0, 1.0), (0.0, 0.0, 1.0, 1.0)])
    data = batch.get_buffer()

    assert data.shape == (3, 24)
    for row in data:
        assert np.allclose(row[16:], [1.0, 0.0, 0.0, 1.0, 0.0, 0.0, 1.0, 1.0])


def test_model_matrix_is_implicit_instance():
    """A model matrix creates instance 0 and later overwrites it"""
    batch = InstanceBatch()
    batch.set_model_matrix(Matrix44.from_translation([4.0, 5.0, 6.0]))

    assert batch.instance_count == 1
    assert np.allclose(batch.get_buffer()[0, 12:15], [4.0, 5.0, 6.0])

    batch.set_model_matrix(Matrix44.from_translation([1.0, 1.0, 1.0]))

    assert batch.instance_count == 1
    assert np.allclose(batch.get_buffer()[0, 12:15], [1.0, 1.0, 1.0])


def test_clear_keeps_layout():
    """Clearing empties the batch but keeps the vector count"""
    batch = InstanceBatch(extra_vector_count=2)
    batch.add_instance((0.0, 0.0, 0.0), IDENTITY, ONE)
    batch.clear()

    assert batch.get_buffer().shape == (0, 24)
    assert batch.extra_vector_count == 2


def test_renderer_instance_api():
    """Renderers route named matrices and vector arrays into their batch"""
    renderer = MeshRenderer()
    renderer.set_instance_matrix(MODEL_MATRIX_NAME, Matrix44.from_translation([0.0, 3.0, 0.0]))
    renderer.add_instance((1.0, 0.0, 0.0), IDENTITY, ONE)
    renderer.set_instance_vector_array("_InstanceColor", [(1.0, 0.0, 0.0, 1.0)])

    data = renderer.get_instance_buffer()

    assert renderer.get_instance_count() == 2
    assert renderer.get_instance_stride() == 80
    assert np.allclose(data[0, 12:15], [0.0, 3.0, 0.0])
    assert np.allclose(data[1, 16:], [1.0, 0.0, 0.0, 1.0])
    assert "_InstanceColor" in renderer.instance_uniforms


def test_other_named_matrix_does_not_create_instance():
    """Only the model matrix becomes an instance"""
    renderer = MeshRenderer()
    renderer.set_instance_matrix("_ViewMatrix", Matrix44.identity())

    assert renderer.get_instance_count() == 0
    assert "_ViewMatrix" in renderer.instance_uniforms


def test_mirrored_model_matrix_round_trips():
    """Mirrored model matrices keep their handedness in the buffer"""
    batch = InstanceBatch()
    matrix = compose_trs((0.0, 0.0, 0.0), IDENTITY, (-1.0, 1.0, 1.0))

    batch.set_model_matrix(matrix)

    assert np.allclose(batch.get_buffer()[0, :16], np.asarray(matrix).reshape(-1), atol=1e-5)


@pytest.mark.parametrize("index", [-1, 1])
def test_instance_index_out_of_range(index):
    """Negative and past-the-end instance indices are rejected"""
    batch = InstanceBatch(extra_vector_count=1)
    batch.add_instance((0.0, 0.0, 0.0), IDENTITY, ONE)

    with pytest.raises(IndexError):
        batch.set_instance_transform(index, (1.0, 0.0, 0.0), IDENTITY, ONE)
    with pytest.raises(IndexError):
        batch.set_instance_extra_vector(index, 0, (1.0, 1.0, 1.0, 1.0))

    assert np.allclose(batch.get_buffer()[0, 12:15], [0.0, 0.0, 0.0])
    assert np.allclose(batch.get_buffer()[0, 16:], 0.0)


class FakeBuffer:
    """Records writes the way a moderngl.Buffer would receive them."""

    def __init__(self, size):
        self.size = size
        self.writes = []
        self.released = False

    def write(self, data):
        self.writes.append(bytes(data))

    def release(self):
        self.released = True


class FakeContext:
    def __init__(self):
        self.buffers = []

    def buffer(self, reserve=0, dynamic=False):
        buffer = FakeBuffer(reserve)
        self.buffers.append(buffer)
        return buffer


def test_instance_buffer_without_context_is_array():
    """No context means the float32 array itself"""
    renderer = MeshRenderer()
    renderer.add_instance((1.0, 0.0, 0.0), IDENTITY, ONE)

    data = renderer.get_instance_buffer()

    assert isinstance(data, np.ndarray)
    assert data.dtype == np.float32


def test_instance_buffer_uploads_only_after_rebuild():
    """Unchanged batches are not re-uploaded"""
    ctx = FakeContext()
    renderer = MeshRenderer()
    renderer.add_instance((1.0, 0.0, 0.0), IDENTITY, ONE)

    first = renderer.get_instance_buffer(ctx)
    second = renderer.get_instance_buffer(ctx)

    assert first is second
    assert len(ctx.buffers) == 1
    assert len(first.writes) == 1
    assert first.writes[0] == renderer.instances.get_buffer().tobytes()

    renderer.set_instance_transform(0, (2.0, 0.0, 0.0), IDENTITY, ONE)
    third = renderer.get_instance_buffer(ctx)

    assert third is first
    assert len(first.writes) == 2


def test_instance_buffer_grows_and_releases_old():
    """Outgrowing the GPU buffer reallocates and releases the old one"""
    ctx = FakeContext()
    renderer = MeshRenderer()
    renderer.add_instance((0.0, 0.0, 0.0), IDENTITY, ONE)
    small = renderer.get_instance_buffer(ctx)

    renderer.add_instance((1.0, 0.0, 0.0), IDENTITY, ONE)
    large = renderer.get_instance_buffer(ctx)

    assert large is not small
    assert small.released
    assert large.size == 2 * renderer.get_instance_stride()
    assert large.writes == [renderer.instances.get_buffer().tobytes()]
