"""
Decoded GVAS document.

Properties are kept in file order in a single name -> Property store.
The per-type buckets are views over that store, so a name can only ever
appear in the bucket matching its type tag.
"""

import math
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, List, Optional

from .errors import StructuralViolation
from .types import GvasHeader, Property, PropertyType


class Gvas:
    """Contents of a GVAS '.sav' file."""

    def __init__(self, header: GvasHeader):
        self.header = header
        self.order: List[str] = []
        self.types: Dict[str, PropertyType] = {}
        self.properties: Dict[str, Property] = {}
        self.diagnostics: List[str] = []

    def add(self, prop: Property, position: Optional[int] = None):
        """Append a property, keeping names unique.

        ``position`` is the byte offset the property started at, reported
        if the name is already taken.
        """
        if prop.name in self.properties:
            raise StructuralViolation(
                "duplicate property", field=prop.name, position=position
            )
        self.order.append(prop.name)
        self.types[prop.name] = prop.type
        self.properties[prop.name] = prop

    def __len__(self) -> int:
        return len(self.order)

    def __iter__(self):
        return (self.properties[name] for name in self.order)

    def __contains__(self, name: str) -> bool:
        return name in self.properties

    def __getitem__(self, name: str) -> Any:
        return self.properties[name].value

    def get(self, name: str, default: Any = None) -> Any:
        prop = self.properties.get(name)
        return default if prop is None else prop.value

    def bucket(self, prop_type: PropertyType) -> Dict[str, Any]:
        """All values of one type, in file order."""
        return {
            name: self.properties[name].value
            for name in self.order
            if self.types[name] is prop_type
        }

    @property
    def large_world_coords(self) -> bool:
        return self.header.large_world_coords

    @property
    def bools(self):
        return self.bucket(PropertyType.BOOL)

    @property
    def floats(self):
        return self.bucket(PropertyType.FLOAT)

    @property
    def ints(self):
        return self.bucket(PropertyType.INT)

    @property
    def strings(self):
        return self.bucket(PropertyType.STR)

    @property
    def quats(self):
        return self.bucket(PropertyType.QUAT)

    @property
    def vectors(self):
        return self.bucket(PropertyType.VECTOR)

    @property
    def bool_arrays(self):
        return self.bucket(PropertyType.BOOL_ARRAY)

    @property
    def byte_arrays(self):
        return self.bucket(PropertyType.BYTE_ARRAY)

    @property
    def float_arrays(self):
        return self.bucket(PropertyType.FLOAT_ARRAY)

    @property
    def int_arrays(self):
        return self.bucket(PropertyType.INT_ARRAY)

    @property
    def string_arrays(self):
        return self.bucket(PropertyType.STR_ARRAY)

    @property
    def text_arrays(self):
        return self.bucket(PropertyType.TEXT_ARRAY)

    @property
    def rotator_arrays(self):
        return self.bucket(PropertyType.ROTATOR_ARRAY)

    @property
    def transform_arrays(self):
        return self.bucket(PropertyType.TRANSFORM_ARRAY)

    @property
    def vector_arrays(self):
        return self.bucket(PropertyType.VECTOR_ARRAY)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready rendering: header, order, raw type tags and buckets."""
        result: Dict[str, Any] = {
            "_header": _plain(self.header),
            "_order": list(self.order),
            "_types": {name: list(t.tags) for name, t in self.types.items()},
        }
        for prop_type in PropertyType:
            values = self.bucket(prop_type)
            if values:
                result[prop_type.bucket] = _plain(values)
        if self.diagnostics:
            result["_diagnostics"] = list(self.diagnostics)
        return result

    def __repr__(self) -> str:
        return (
            f"<Gvas v{self.header.gvas_version} save_type={self.header.save_type!r} "
            f"properties={len(self.order)}>"
        )


def _plain(value: Any) -> Any:
    if is_dataclass(value):
        return _plain(asdict(value))
    if isinstance(value, float) and not math.isfinite(value):
        # JSON has no NaN or Infinity literals
        return str(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
