"""
Decoders for ArrayProperty payloads of scalar element types.

Each function reads from a reader bounded to the payload region. The
caller compares ``reader.consumed()`` with the declared payload length.
"""

from typing import List

import numpy as np

from .reader import BinaryReader
from .types import GvasString


def parse_bool_array(reader: BinaryReader) -> List[bool]:
    count = reader.read_uint32()
    return [b != 0 for b in reader.read_bytes(count)]


def parse_int_array(reader: BinaryReader) -> List[int]:
    count = reader.read_uint32()
    return np.frombuffer(reader.read_bytes(count * 4), dtype="<i4").tolist()


def parse_float_array(reader: BinaryReader) -> List[float]:
    count = reader.read_uint32()
    return np.frombuffer(reader.read_bytes(count * 4), dtype="<f4").tolist()


def parse_string_array(reader: BinaryReader) -> List[GvasString]:
    count = reader.read_uint32()
    return [reader.read_fstring() for _ in range(count)]


def parse_byte_array(reader: BinaryReader) -> List[int]:
    """Whole payload as a list of byte values, count prefix included."""
    return list(reader.read_bytes(reader.remaining()))
