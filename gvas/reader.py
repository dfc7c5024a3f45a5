"""
Binary Reader for GVAS files.

Provides bounds-checked little-endian reads, the GVAS FString encoding
(UTF-8 or UTF-16 selected by the sign of the length) and the geometry
structs whose component width depends on large world coordinates.
"""

import struct
from typing import Optional, Tuple

from construct import Struct, Float32l, Float64l

from .errors import StructuralViolation, TruncatedInput
from .types import GvasString, Vector, Rotator, Quaternion


def _geometry(component, *names):
    return Struct(*[name / component for name in names])


# Fixed geometry layouts, (float32 layout, float64 layout)
VECTOR_STRUCTS = (
    _geometry(Float32l, "x", "y", "z"),
    _geometry(Float64l, "x", "y", "z"),
)
ROTATOR_STRUCTS = (
    _geometry(Float32l, "pitch", "yaw", "roll"),
    _geometry(Float64l, "pitch", "yaw", "roll"),
)
QUAT_STRUCTS = (
    _geometry(Float32l, "x", "y", "z", "w"),
    _geometry(Float64l, "x", "y", "z", "w"),
)


class BinaryReader:
    """Binary data reader with GVAS format support.

    Reads are confined to ``data[offset:end]``. A reader over a property
    payload shares the file buffer, so positions stay absolute.
    """

    def __init__(self, data: bytes, offset: int = 0, end: Optional[int] = None):
        self.data = data
        self.start = offset
        self.pos = offset
        self.end = len(data) if end is None else end

    def seek(self, pos: int):
        """Seek to absolute position."""
        self.pos = pos

    def tell(self) -> int:
        """Return current position."""
        return self.pos

    def consumed(self) -> int:
        """Bytes read since the start of this reader's region."""
        return self.pos - self.start

    def remaining(self) -> int:
        """Return remaining bytes."""
        return self.end - self.pos

    def sub_reader(self, length: int) -> "BinaryReader":
        """Return a reader over the next ``length`` bytes and skip past them."""
        self._check(length)
        reader = BinaryReader(self.data, self.pos, self.pos + length)
        self.pos += length
        return reader

    def _check(self, count: int):
        if count < 0 or self.pos + count > len(self.data):
            raise TruncatedInput(
                f"read of {count} bytes past end of data",
                position=self.pos,
                expected=count,
                actual=max(len(self.data) - self.pos, 0),
            )
        if self.pos + count > self.end:
            # Inside the file but outside the declared region
            raise StructuralViolation(
                f"read of {count} bytes past end of region [{self.start}, {self.end})",
                position=self.pos,
                expected=count,
                actual=self.end - self.pos,
            )

    def read_bytes(self, count: int) -> bytes:
        """Read raw bytes."""
        self._check(count)
        result = self.data[self.pos : self.pos + count]
        self.pos += count
        return result

    def read_uint8(self) -> int:
        return self.read_bytes(1)[0]

    def read_uint16(self) -> int:
        return struct.unpack("<H", self.read_bytes(2))[0]

    def read_int32(self) -> int:
        return struct.unpack("<i", self.read_bytes(4))[0]

    def read_uint32(self) -> int:
        return struct.unpack("<I", self.read_bytes(4))[0]

    def read_float(self) -> float:
        return struct.unpack("<f", self.read_bytes(4))[0]

    def read_double(self) -> float:
        return struct.unpack("<d", self.read_bytes(8))[0]

    def read_length(self, field: str) -> int:
        """Read an 8-byte length stored as two u32 words.

        The high word is always zero in supported files.
        """
        pos = self.pos
        low = self.read_uint32()
        high = self.read_uint32()
        if high != 0:
            raise StructuralViolation(
                "length too large", field=field, position=pos, expected=0, actual=high
            )
        return low

    def read_struct(self, fmt: Struct):
        """Parse a fixed-size construct Struct at the current position."""
        return fmt.parse(self.read_bytes(fmt.sizeof()))

    def expect_byte(self, expected: int, field: str) -> int:
        pos = self.pos
        value = self.read_uint8()
        if value != expected:
            raise StructuralViolation(
                f"unexpected {field}", field=field, position=pos,
                expected=expected, actual=value,
            )
        return value

    def expect_zero_bytes(self, count: int, field: str):
        """Read ``count`` bytes which must all be zero."""
        pos = self.pos
        raw = self.read_bytes(count)
        if any(raw):
            raise StructuralViolation(
                f"expected all zeroes in {field}", field=field, position=pos,
                expected=bytes(count).hex(), actual=raw.hex(),
            )

    def read_fstring(self) -> GvasString:
        """Read a GVAS length-prefixed string (FString).

        Format:
        - int32 length; 0 means a null string
        - positive: UTF-8 bytes including a NUL terminator
        - negative: UTF-16LE code units including a NUL terminator
        """
        pos = self.pos
        length = self.read_int32()
        if length == 0:
            return None
        if length > 0:
            raw = self.read_bytes(length)
            if raw[-1] != 0:
                raise StructuralViolation(
                    "expected null terminator", field="string", position=pos,
                    expected=0, actual=raw[-1],
                )
            try:
                return raw[:-1].decode("utf-8")
            except UnicodeDecodeError as e:
                raise StructuralViolation(
                    f"invalid UTF-8 string: {e.reason}", field="string", position=pos
                ) from e
        # Unicode string (UTF-16LE)
        units = -length
        raw = self.read_bytes(units * 2)
        terminator = raw[-2:]
        if terminator != b"\x00\x00":
            raise StructuralViolation(
                "expected null terminator", field="string", position=pos,
                expected=0, actual=struct.unpack("<H", terminator)[0],
            )
        return raw[:-2].decode("utf-16-le", errors="surrogatepass")

    def read_vector(self, large_world_coords: bool) -> Vector:
        """Read a 3D vector (3 floats or 3 doubles)."""
        v = self.read_struct(VECTOR_STRUCTS[large_world_coords])
        return Vector(x=v.x, y=v.y, z=v.z)

    def read_rotator(self, large_world_coords: bool) -> Rotator:
        """Read a rotator (pitch, yaw, roll)."""
        r = self.read_struct(ROTATOR_STRUCTS[large_world_coords])
        return Rotator(pitch=r.pitch, yaw=r.yaw, roll=r.roll)

    def read_quat(self, large_world_coords: bool) -> Quaternion:
        """Read a quaternion (x, y, z, w)."""
        q = self.read_struct(QUAT_STRUCTS[large_world_coords])
        return Quaternion(x=q.x, y=q.y, z=q.z, w=q.w)


def read_fstring_at(data: bytes, offset: int) -> Tuple[GvasString, int]:
    """Read an FString from bytes at given offset.

    Standalone function for cases where a BinaryReader isn't used.

    Args:
        data: Raw bytes
        offset: Starting offset

    Returns:
        (string, new_offset) tuple
    """
    reader = BinaryReader(data, offset)
    value = reader.read_fstring()
    return value, reader.tell()
