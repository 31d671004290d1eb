"""Tests for BinaryReader"""

import struct

import numpy as np
import pytest

from src.scenelib.core.binary_reader import BinaryReader
from src.scenelib.core.errors import SceneDecodeError, TruncatedStreamError


def test_read_string_uses_length_prefix():
    """A 2-byte string decodes to its literal value without a terminator"""
    reader = BinaryReader(struct.pack('<i', 2) + b"Ab" + b"\x00trailing")

    assert reader.read_string() == "Ab"
    assert reader.position == 6


def test_read_primitives_in_sequence():
    """Fields are consumed strictly in order"""
    data = struct.pack('<ifB', -7, 0.25, 1) + struct.pack('<3f', 1.0, 2.0, 3.0)
    reader = BinaryReader(data)

    assert reader.read_int() == -7
    assert reader.read_float() == 0.25
    assert reader.read_bool() is True
    assert np.allclose(np.asarray(reader.read_vector3()), [1.0, 2.0, 3.0])
    assert reader.at_end()


def test_read_quaternion_keeps_xyzw_order():
    """Quaternions are stored as x, y, z, w"""
    reader = BinaryReader(struct.pack('<4f', 0.0, 0.0, 0.0, 1.0))
    rotation = reader.read_quaternion()

    assert np.isclose(rotation.w, 1.0)
    assert np.isclose(rotation.x, 0.0)


def test_read_bool_only_one_is_true():
    """Flag bytes other than 1 read as False"""
    reader = BinaryReader(bytes([2, 0, 1]))

    assert reader.read_bool() is False
    assert reader.read_bool() is False
    assert reader.read_bool() is True


def test_truncated_read_raises():
    """Reading past the end raises instead of returning garbage"""
    reader = BinaryReader(b"\x01\x00")

    with pytest.raises(TruncatedStreamError) as info:
        reader.read_int()

    assert info.value.wanted == 4
    assert info.value.available == 2


def test_truncated_string_raises():
    """A string size larger than the remaining data is rejected"""
    reader = BinaryReader(struct.pack('<i', 10) + b"abc")

    with pytest.raises(TruncatedStreamError):
        reader.read_string()


def test_from_file(tmp_path):
    """Files are read whole into memory"""
    path = tmp_path / "value.bin"
    path.write_bytes(struct.pack('<i', 42))

    reader = BinaryReader.from_file(path)
    assert reader.read_int() == 42
    assert reader.name == str(path)


def test_invalid_utf8_string_raises():
    """Undecodable string bytes are a decode error, not replacement characters"""
    reader = BinaryReader(struct.pack('<i', 2) + b"\xff\xfe", name="bad.scene")

    with pytest.raises(SceneDecodeError) as info:
        reader.read_string()

    assert "bad.scene" in str(info.value)
