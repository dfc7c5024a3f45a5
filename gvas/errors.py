"""
Exceptions raised while decoding GVAS files.

Every decode failure is one of these. A failure aborts the whole decode;
no partial document is returned.
"""

from typing import Any, Optional


class GvasError(ValueError):
    """Base class for GVAS decode failures.

    Args:
        message: Human readable description
        field: Name of the offending field or property
        position: Byte offset at which the problem was detected
        expected: Expected value, if the check compared against one
        actual: Value actually found
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        position: Optional[int] = None,
        expected: Any = None,
        actual: Any = None,
    ):
        self.message = message
        self.field = field
        self.position = position
        self.expected = expected
        self.actual = actual
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [self.message]
        if self.field is not None:
            parts.append(f"field={self.field!r}")
        if self.position is not None:
            parts.append(f"pos={self.position}")
        if self.expected is not None or self.actual is not None:
            parts.append(f"expected={self.expected!r}, actual={self.actual!r}")
        return ", ".join(parts)


class FormatError(GvasError):
    """Not a GVAS file, or an unsupported format version."""


class StructuralViolation(GvasError):
    """A must-equal / must-be-zero check failed."""


class TruncatedInput(GvasError):
    """A read would run past the end of the buffer."""


class UnsupportedFeature(GvasError):
    """Well-formed but undocumented property, struct or field kind."""
