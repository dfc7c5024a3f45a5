"""
TextProperty array decoder.

Text entry layout:
  u32 component type (0 empty, 1 rich, 2 simple, 8 unknown)
  u8  indicator (255, 3, 255, 0 respectively)
  body, depending on the component type

Rich text body:
  u8 flag count (8), u32 flags (0), empty FString, FString guid,
  FString pattern, u32 argument count, then per argument:
  FString key, u8 separator (4), u32 content type, u8 indicator (255),
  u32 value count, FString values
"""

from typing import List

from .errors import StructuralViolation
from .reader import BinaryReader
from .types import GvasString, GvasText, RichText, RichTextFormat, TextType8

TEXT_EMPTY = 0
TEXT_RICH = 1
TEXT_SIMPLE = 2
TEXT_TYPE8 = 8

EXPECTED_INDICATOR = {
    TEXT_EMPTY: 255,
    TEXT_RICH: 3,
    TEXT_SIMPLE: 255,
    TEXT_TYPE8: 0,
}


def _read_strings(reader: BinaryReader) -> List[GvasString]:
    count = reader.read_uint32()
    return [reader.read_fstring() for _ in range(count)]


def _expect_uint32(reader: BinaryReader, expected: int, field: str) -> int:
    pos = reader.tell()
    value = reader.read_uint32()
    if value != expected:
        raise StructuralViolation(
            f"unexpected {field}", field=field, position=pos,
            expected=expected, actual=value,
        )
    return value


def parse_rich_text(reader: BinaryReader) -> RichText:
    reader.expect_byte(8, "rich text flag count")
    _expect_uint32(reader, 0, "rich text flags")
    pos = reader.tell()
    unknown = reader.read_fstring()
    if unknown:
        raise StructuralViolation(
            "expected empty string", field="rich text", position=pos,
            expected="", actual=unknown,
        )
    guid = reader.read_fstring()
    pattern = reader.read_fstring()

    arg_count = reader.read_uint32()
    text_format = []
    for _ in range(arg_count):
        format_key = reader.read_fstring()
        reader.expect_byte(4, "format argument separator")
        content_type = reader.read_uint32()
        reader.expect_byte(255, "format argument indicator")
        text_format.append(RichTextFormat(
            format_key=format_key,
            content_type=content_type,
            values=_read_strings(reader),
        ))
    return RichText(guid=guid, pattern=pattern, text_format=text_format)


def parse_text(reader: BinaryReader) -> GvasText:
    """Read a single text entry."""
    pos = reader.tell()
    component_type = reader.read_uint32()
    if component_type not in EXPECTED_INDICATOR:
        raise StructuralViolation(
            "unexpected text component type", field="component_type",
            position=pos, expected=sorted(EXPECTED_INDICATOR), actual=component_type,
        )
    reader.expect_byte(
        EXPECTED_INDICATOR[component_type],
        f"indicator for text component type {component_type}",
    )

    if component_type == TEXT_EMPTY:
        _expect_uint32(reader, 0, "empty text count")
        return None
    if component_type == TEXT_RICH:
        return parse_rich_text(reader)
    if component_type == TEXT_SIMPLE:
        return _read_strings(reader)
    return TextType8(
        unknown=reader.read_fstring(),
        guid=reader.read_fstring(),
        value=reader.read_fstring(),
    )


def parse_text_array(reader: BinaryReader) -> List[GvasText]:
    count = reader.read_uint32()
    return [parse_text(reader) for _ in range(count)]
