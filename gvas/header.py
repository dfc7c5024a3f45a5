"""
GVAS header reader.

Layout:
  magic "GVAS", u32 format version (2 or 3), u32 structure version,
  u32 unknown (version 3 only), engine version (u16 x3, u32, FString),
  u32 custom format version, u32 custom data count + 20-byte records,
  FString save type.
"""

import logging

from construct import Struct, Array, Int16ul, Int32ul

from .errors import FormatError
from .reader import BinaryReader
from .types import CustomData, EngineVersion, GvasHeader

logger = logging.getLogger(__name__)

MAGIC = b"GVAS"
SUPPORTED_VERSIONS = (2, 3)

EngineVersionFields = Struct(
    "major" / Int16ul,
    "minor" / Int16ul,
    "patch" / Int16ul,
    "build" / Int32ul,
)

CustomDataRecord = Struct(
    "guid" / Array(4, Int32ul),
    "value" / Int32ul,
)


def parse_header(reader: BinaryReader) -> GvasHeader:
    """Parse the file preamble.

    Leaves the reader positioned at the first property.
    """
    magic = reader.read_bytes(4)
    if magic != MAGIC:
        raise FormatError(
            "not a GVAS file", field="magic", position=0,
            expected=MAGIC.decode(), actual=magic.decode("latin-1"),
        )

    pos = reader.tell()
    gvas_version = reader.read_uint32()
    if gvas_version not in SUPPORTED_VERSIONS:
        raise FormatError(
            f"GVAS format version {gvas_version} is not supported",
            field="gvas_version", position=pos,
            expected=SUPPORTED_VERSIONS, actual=gvas_version,
        )
    structure_version = reader.read_uint32()
    unknown_version = reader.read_uint32() if gvas_version == 3 else None

    fields = reader.read_struct(EngineVersionFields)
    engine_version = EngineVersion(
        major=fields.major,
        minor=fields.minor,
        patch=fields.patch,
        build=fields.build,
        build_id=reader.read_fstring(),
    )

    custom_format_version = reader.read_uint32()
    count = reader.read_uint32()
    custom_data = []
    for _ in range(count):
        record = reader.read_struct(CustomDataRecord)
        custom_data.append(CustomData(guid=tuple(record.guid), value=record.value))

    save_type = reader.read_fstring()

    logger.debug(
        "GVAS v%d, engine %d.%d.%d-%d, %d custom data entries, save type %r",
        gvas_version, engine_version.major, engine_version.minor,
        engine_version.patch, engine_version.build, len(custom_data), save_type,
    )
    return GvasHeader(
        gvas_version=gvas_version,
        structure_version=structure_version,
        unknown_version=unknown_version,
        engine_version=engine_version,
        custom_format_version=custom_format_version,
        custom_data=custom_data,
        save_type=save_type,
    )
