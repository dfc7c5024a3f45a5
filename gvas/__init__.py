"""
GVAS save file decoder.

Reads Unreal Engine GVAS '.sav' files into an ordered document of typed
properties.
"""

from .document import Gvas
from .errors import (
    GvasError,
    FormatError,
    StructuralViolation,
    TruncatedInput,
    UnsupportedFeature,
)
from .parser import parse_gvas, parse_gvas_file
from .reader import BinaryReader
from .types import (
    GvasHeader,
    Property,
    PropertyType,
    Quaternion,
    Rotator,
    Transform,
    Vector,
    gvas_to_string,
)

__all__ = [
    'BinaryReader',
    'FormatError',
    'Gvas',
    'GvasError',
    'GvasHeader',
    'Property',
    'PropertyType',
    'Quaternion',
    'Rotator',
    'StructuralViolation',
    'Transform',
    'TruncatedInput',
    'UnsupportedFeature',
    'Vector',
    'gvas_to_string',
    'parse_gvas',
    'parse_gvas_file',
]
