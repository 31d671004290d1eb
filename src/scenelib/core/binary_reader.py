"""
Binary Reader

Sequential little-endian field reader over an in-memory byte buffer.
Scene, material and texture files carry no length prefixes beyond string
sizes, so every field must be consumed in order to stay aligned.
"""

import struct
from pathlib import Path
from typing import Tuple, Union

from pyrr import Quaternion, Vector3, Vector4

from .errors import SceneDecodeError, TruncatedStreamError

_INT32 = struct.Struct('<i')
_FLOAT = struct.Struct('<f')
_VEC3 = struct.Struct('<3f')
_VEC4 = struct.Struct('<4f')


class BinaryReader:
    """
    Reads primitive fields from a byte buffer, advancing a cursor.

    Strings are encoded as an int32 byte size followed by that many UTF-8
    bytes (not NUL-terminated).
    """

    def __init__(self, data: bytes, name: str = "<memory>"):
        """
        Initialize reader.

        Args:
            data: Raw file contents
            name: Source name used in error messages
        """
        self.data = memoryview(bytes(data))
        self.name = name
        self.position = 0

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'BinaryReader':
        """Read a whole file into memory and wrap it."""
        path = Path(path)
        return cls(path.read_bytes(), name=str(path))

    @property
    def remaining(self) -> int:
        return len(self.data) - self.position

    def at_end(self) -> bool:
        return self.remaining <= 0

    def read_bytes(self, size: int) -> bytes:
        if size < 0 or size > self.remaining:
            raise TruncatedStreamError(self.position, size, self.remaining)
        start = self.position
        self.position += size
        return self.data[start:self.position].tobytes()

    def _unpack(self, fmt: struct.Struct) -> tuple:
        if fmt.size > self.remaining:
            raise TruncatedStreamError(self.position, fmt.size, self.remaining)
        values = fmt.unpack_from(self.data, self.position)
        self.position += fmt.size
        return values

    def read_int(self) -> int:
        return self._unpack(_INT32)[0]

    def read_float(self) -> float:
        return self._unpack(_FLOAT)[0]

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_bool(self) -> bool:
        """Read a byte flag; only 1 counts as True."""
        return self.read_byte() == 1

    def read_string(self) -> str:
        start = self.position
        size = self.read_int()
        try:
            return self.read_bytes(size).decode('utf-8')
        except UnicodeDecodeError as exc:
            raise SceneDecodeError(f"Invalid UTF-8 string at offset {start} in {self.name}") from exc

    def read_vector3(self) -> Vector3:
        return Vector3(self._unpack(_VEC3), dtype='f4')

    def read_vector4(self) -> Vector4:
        return Vector4(self._unpack(_VEC4), dtype='f4')

    def read_quaternion(self) -> Quaternion:
        """Read a quaternion stored as (x, y, z, w)."""
        return Quaternion(self._unpack(_VEC4), dtype='f4')

    def read_color(self) -> Tuple[float, float, float, float]:
        """Read an RGBA color as four floats."""
        return self._unpack(_VEC4)

    def __repr__(self):
        return f"BinaryReader(name='{self.name}', position={self.position}, size={len(self.data)})"
