"""
GVAS document driver.

Reads the header, then properties until the top-level "None" terminator.
Nothing may follow the terminator.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .diagnostics import Diagnostics
from .document import Gvas
from .errors import StructuralViolation
from .header import parse_header
from .properties import read_property
from .reader import BinaryReader

logger = logging.getLogger(__name__)


def parse_gvas(data: bytes, log: Optional[logging.Logger] = None) -> Gvas:
    """Parse a GVAS file held in memory.

    Args:
        data: Entire file contents
        log: Receives non-fatal diagnostics (defaults to the module logger)

    Returns:
        Decoded document. Raises a GvasError subclass on any violation.
    """
    data = bytes(data)
    diagnostics = Diagnostics(log or logger)
    reader = BinaryReader(data)

    header = parse_header(reader)
    result = Gvas(header)
    large_world_coords = header.large_world_coords

    while True:
        pos = reader.tell()
        prop = read_property(reader, large_world_coords, diagnostics)
        if prop is None:
            break
        result.add(prop, pos)

    if reader.tell() != len(data):
        raise StructuralViolation(
            "found extra data at EOF", position=reader.tell(),
            expected=len(data), actual=reader.tell(),
        )

    result.diagnostics = list(diagnostics)
    diagnostics.debug("Parsed %d properties", len(result))
    return result


def parse_gvas_file(path: Union[str, Path], log: Optional[logging.Logger] = None) -> Gvas:
    """Read and parse a GVAS '.sav' file."""
    with open(path, "rb") as f:
        data = f.read()
    return parse_gvas(data, log)
