"""
Shared data types for GVAS parsing.

Geometry structs, header records, text values and the closed set of
property type tags. These are the values stored in a decoded document.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple, Union

# Decoded FString: None is the null string (length 0 on the wire)
GvasString = Optional[str]


@dataclass
class Vector:
    """3D Vector."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass
class Rotator:
    """Rotation in degrees, stored pitch/yaw/roll on the wire."""
    pitch: float = 0.0
    yaw: float = 0.0
    roll: float = 0.0


@dataclass
class Quaternion:
    """Rotation quaternion."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


@dataclass
class Transform:
    """Element of a Transform struct array."""
    translation: Vector
    rotation: Quaternion
    scale3d: Vector


@dataclass
class EngineVersion:
    major: int
    minor: int
    patch: int
    build: int
    build_id: GvasString


@dataclass
class CustomData:
    """Custom format entry from the header (engine plugin versions)."""
    guid: Tuple[int, int, int, int]
    value: int


@dataclass
class GvasHeader:
    gvas_version: int
    structure_version: int
    unknown_version: Optional[int]
    engine_version: EngineVersion
    custom_format_version: int
    custom_data: List[CustomData] = field(default_factory=list)
    save_type: GvasString = None

    @property
    def large_world_coords(self) -> bool:
        """Version 3 files store geometry components as doubles."""
        return self.gvas_version == 3


@dataclass
class RichTextFormat:
    format_key: GvasString
    content_type: int
    values: List[GvasString]


@dataclass
class RichText:
    guid: GvasString
    pattern: GvasString
    text_format: List[RichTextFormat]


@dataclass
class TextType8:
    """Text component type 8. Meaning of the first string is unknown."""
    unknown: GvasString
    guid: GvasString
    value: GvasString


# None (empty), list of strings (simple), RichText or TextType8
GvasText = Union[None, List[GvasString], RichText, TextType8]


class PropertyType(Enum):
    """Closed set of property type tags.

    Each member holds the raw tag strings as read from the file and the
    name of the document bucket its values live in.
    """

    BOOL = (("BoolProperty",), "bools")
    FLOAT = (("FloatProperty",), "floats")
    INT = (("IntProperty",), "ints")
    STR = (("StrProperty",), "strings")
    QUAT = (("StructProperty", "Quat"), "quats")
    VECTOR = (("StructProperty", "Vector"), "vectors")
    BOOL_ARRAY = (("ArrayProperty", "BoolProperty"), "bool_arrays")
    BYTE_ARRAY = (("ArrayProperty", "ByteProperty"), "byte_arrays")
    FLOAT_ARRAY = (("ArrayProperty", "FloatProperty"), "float_arrays")
    INT_ARRAY = (("ArrayProperty", "IntProperty"), "int_arrays")
    STR_ARRAY = (("ArrayProperty", "StrProperty"), "string_arrays")
    TEXT_ARRAY = (("ArrayProperty", "TextProperty"), "text_arrays")
    ROTATOR_ARRAY = (("ArrayProperty", "StructProperty", "Rotator"), "rotator_arrays")
    TRANSFORM_ARRAY = (("ArrayProperty", "StructProperty", "Transform"), "transform_arrays")
    VECTOR_ARRAY = (("ArrayProperty", "StructProperty", "Vector"), "vector_arrays")

    def __init__(self, tags: Tuple[str, ...], bucket: str):
        self.tags = tags
        self.bucket = bucket

    def __str__(self) -> str:
        return "/".join(self.tags)


@dataclass
class Property:
    """A decoded (name, type tag, value) triple."""
    name: str
    type: PropertyType
    value: Any


def gvas_to_string(s: GvasString) -> str:
    """Render a GvasString for display."""
    if s is None:
        return "null"
    return s.replace("<br>", "\n").rstrip() or "[blank]"
