"""
GVAS Property Reader

Reads one property from a property list and decodes its payload.

Property Format:
  [name: FString][type: FString][length: u32 + u32 (high word 0)]
  [dtype: FString]         ArrayProperty / StructProperty only
  [guid: 16 zero bytes]    StructProperty only
  [terminator: u8 = 0]
  [payload: length bytes]

BoolProperty is the exception: length is 0 and the value byte sits before
the terminator, with no payload after it.

A list of properties ends with a property named "None" that has a null
type. Transform elements of struct arrays are themselves property lists,
so struct array decoding re-enters read_property.
"""

from typing import Optional

from .arrays import (
    parse_bool_array,
    parse_byte_array,
    parse_float_array,
    parse_int_array,
    parse_string_array,
)
from .diagnostics import Diagnostics
from .errors import StructuralViolation, UnsupportedFeature
from .reader import BinaryReader
from .text import parse_text_array
from .types import Property, PropertyType, Transform

SENTINEL = "None"

# dtype of ArrayProperty -> (type tag, decoder)
ARRAY_DECODERS = {
    "BoolProperty": (PropertyType.BOOL_ARRAY, parse_bool_array),
    "IntProperty": (PropertyType.INT_ARRAY, parse_int_array),
    "FloatProperty": (PropertyType.FLOAT_ARRAY, parse_float_array),
    "StrProperty": (PropertyType.STR_ARRAY, parse_string_array),
    "TextProperty": (PropertyType.TEXT_ARRAY, parse_text_array),
    "ByteProperty": (PropertyType.BYTE_ARRAY, parse_byte_array),
}

STRUCT_ARRAY_TYPES = {
    "Rotator": PropertyType.ROTATOR_ARRAY,
    "Vector": PropertyType.VECTOR_ARRAY,
    "Transform": PropertyType.TRANSFORM_ARRAY,
}

# Sub-properties of a Transform element and their required types
TRANSFORM_FIELDS = {
    "Translation": PropertyType.VECTOR,
    "Rotation": PropertyType.QUAT,
    "Scale3D": PropertyType.VECTOR,
}

STRUCT_ARRAY_RESERVED = 17
STRUCT_GUID_SIZE = 16


def is_sentinel(name) -> bool:
    return name is None or name == SENTINEL


def geometry_size(components: int, large_world_coords: bool) -> int:
    return components * (8 if large_world_coords else 4)


def _expect_length(name: str, kind: str, plen: int, size: int, pos: int):
    if plen != size:
        raise StructuralViolation(
            f"{kind} length mismatch", field=name, position=pos,
            expected=size, actual=plen,
        )


def _check_consumed(payload: BinaryReader, name: str, kind: str):
    if payload.remaining() != 0:
        raise StructuralViolation(
            f"{kind} length mismatch", field=name, position=payload.start,
            expected=payload.end - payload.start, actual=payload.consumed(),
        )


def read_property(
    reader: BinaryReader,
    large_world_coords: bool,
    diagnostics: Optional[Diagnostics] = None,
    early_exit: bool = False,
) -> Optional[Property]:
    """Read one property at the reader's position.

    Args:
        reader: Reader positioned at the property name
        large_world_coords: Geometry components are doubles (GVAS v3)
        diagnostics: Sink for non-fatal warnings
        early_exit: Stop right after a null/"None" name without reading
            its type (nested property lists)

    Returns:
        The decoded Property, or None at the end of the property list.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()

    pos = reader.tell()
    name = reader.read_fstring()
    if early_exit and is_sentinel(name):
        return None

    type_pos = reader.tell()
    ptype = reader.read_fstring()
    if is_sentinel(name):
        if ptype is not None:
            raise StructuralViolation(
                "unexpected type for end of property list", field=name,
                position=type_pos, expected=None, actual=ptype,
            )
        if name is None:
            raise StructuralViolation("property name is null", position=pos)
        return None

    plen = reader.read_length(name)

    dtype = None
    if ptype in ("ArrayProperty", "StructProperty"):
        dtype = reader.read_fstring()

    if ptype == "BoolProperty":
        _expect_length(name, "BoolProperty", plen, 0, pos)
        value_pos = reader.tell()
        value = reader.read_uint8()
        if value not in (0, 1):
            raise StructuralViolation(
                "unexpected BoolProperty value", field=name, position=value_pos,
                expected=(0, 1), actual=value,
            )
        reader.expect_byte(0, "terminator")
        return Property(name, PropertyType.BOOL, value == 1)

    if ptype == "StructProperty":
        reader.expect_zero_bytes(STRUCT_GUID_SIZE, "guid")

    reader.expect_byte(0, "terminator")
    payload = reader.sub_reader(plen)
    return _read_payload(payload, name, ptype, dtype, large_world_coords, diagnostics)


def _read_payload(
    payload: BinaryReader,
    name: str,
    ptype: str,
    dtype: Optional[str],
    large_world_coords: bool,
    diagnostics: Diagnostics,
) -> Property:
    """Decode a payload region according to its type tags."""
    pos = payload.start
    plen = payload.remaining()

    if ptype == "StrProperty":
        value = payload.read_fstring()
        _check_consumed(payload, name, "StrProperty")
        return Property(name, PropertyType.STR, value)

    if ptype == "FloatProperty":
        _expect_length(name, "FloatProperty", plen, 4, pos)
        return Property(name, PropertyType.FLOAT, payload.read_float())

    if ptype == "IntProperty":
        _expect_length(name, "IntProperty", plen, 4, pos)
        return Property(name, PropertyType.INT, payload.read_uint32())

    if ptype == "StructProperty":
        if dtype == "Quat":
            _expect_length(name, "Quat", plen, geometry_size(4, large_world_coords), pos)
            return Property(name, PropertyType.QUAT, payload.read_quat(large_world_coords))
        if dtype == "Vector":
            _expect_length(name, "Vector", plen, geometry_size(3, large_world_coords), pos)
            return Property(name, PropertyType.VECTOR, payload.read_vector(large_world_coords))
        raise UnsupportedFeature(
            f"StructProperty {dtype} is not implemented", field=name, position=pos
        )

    if ptype != "ArrayProperty":
        raise UnsupportedFeature(
            f"property type {ptype} is not implemented", field=name, position=pos
        )

    if dtype == "StructProperty":
        prop_type, value = parse_struct_array(payload, name, large_world_coords, diagnostics)
        return Property(name, prop_type, value)

    if dtype not in ARRAY_DECODERS:
        raise UnsupportedFeature(
            f"ArrayProperty of {dtype} is not implemented", field=name, position=pos
        )
    prop_type, decode = ARRAY_DECODERS[dtype]
    value = decode(payload)
    _check_consumed(payload, name, f"{dtype} array")
    return Property(name, prop_type, value)


def parse_struct_array(
    reader: BinaryReader,
    property_name: str,
    large_world_coords: bool,
    diagnostics: Diagnostics,
):
    """Decode the payload of an ArrayProperty of StructProperty.

    Layout:
      u32 entry count, FString property name (repeated),
      FString "StructProperty", u32 + u32 field size,
      FString field name (Rotator/Vector/Transform), 17 zero bytes, entries

    Returns:
        (PropertyType, list of values) tuple
    """
    count = reader.read_uint32()

    pos = reader.tell()
    repeated_name = reader.read_fstring()
    if repeated_name != property_name:
        raise StructuralViolation(
            "struct array property name mismatch", field=property_name,
            position=pos, expected=property_name, actual=repeated_name,
        )

    pos = reader.tell()
    struct_type = reader.read_fstring()
    if struct_type != "StructProperty":
        raise StructuralViolation(
            "invalid struct array header", field=property_name, position=pos,
            expected="StructProperty", actual=struct_type,
        )

    field_size = reader.read_length("field_size")

    pos = reader.tell()
    field_name = reader.read_fstring()
    if field_name not in STRUCT_ARRAY_TYPES:
        raise UnsupportedFeature(
            f"struct array of {field_name} is not implemented",
            field=property_name, position=pos,
        )
    reader.expect_zero_bytes(STRUCT_ARRAY_RESERVED, "reserved")

    start = reader.tell()
    if field_name == "Rotator":
        values = [reader.read_rotator(large_world_coords) for _ in range(count)]
    elif field_name == "Vector":
        values = [reader.read_vector(large_world_coords) for _ in range(count)]
    else:
        diagnostics.debug("Reading %d Transforms...", count)
        values = [read_transform(reader, large_world_coords, diagnostics) for _ in range(count)]

    consumed = reader.tell() - start
    if consumed != field_size:
        diagnostics.warning(
            "%s: struct array field size %d does not match %d bytes read",
            property_name, field_size, consumed,
        )
    if reader.remaining() != 0:
        diagnostics.warning(
            "%s: Struct[] size %d does not match ArrayProperty data size %d, "
            "file may be corrupt",
            property_name, reader.consumed(), reader.end - reader.start,
        )
    return STRUCT_ARRAY_TYPES[field_name], values


def read_transform(
    reader: BinaryReader,
    large_world_coords: bool,
    diagnostics: Diagnostics,
) -> Transform:
    """Read one Transform element (a nested property list)."""
    fields = {}
    while True:
        pos = reader.tell()
        try:
            prop = read_property(reader, large_world_coords, diagnostics, early_exit=True)
        except UnsupportedFeature as e:
            # Only Translation, Rotation and Scale3D may appear here
            raise StructuralViolation(
                f"unexpected Transform property: {e.message}",
                field=e.field, position=pos,
                expected=sorted(TRANSFORM_FIELDS),
            ) from e
        if prop is None:
            break
        expected = TRANSFORM_FIELDS.get(prop.name)
        if expected is not prop.type:
            raise StructuralViolation(
                "unexpected Transform property", field=prop.name, position=pos,
                expected=str(expected) if expected else sorted(TRANSFORM_FIELDS),
                actual=str(prop.type),
            )
        if prop.name in fields:
            raise StructuralViolation(
                "duplicate Transform property", field=prop.name, position=pos
            )
        fields[prop.name] = prop.value

    missing = [key for key in TRANSFORM_FIELDS if key not in fields]
    if missing:
        raise StructuralViolation(
            f"Transform is missing {', '.join(missing)}", position=reader.tell()
        )
    return Transform(
        translation=fields["Translation"],
        rotation=fields["Rotation"],
        scale3d=fields["Scale3D"],
    )
