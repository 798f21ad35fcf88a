"""
Hotel Maintenance Entities — Local Record Codec
==================================================
Entities <-> camelCase JSON objects, the shape kept in local
persisted slots (one JSON array per collection).

Absent optional values are omitted from the record rather than
written as null.
"""

from __future__ import annotations

import dataclasses
import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Type, TypeVar

from maintenance.entities.models import Avatar, ItemUsed, RepairImage

T = TypeVar("T")

_CAMEL_RE = re.compile(r"_([a-z])")
_SNAKE_RE = re.compile(r"([A-Z])")


def camel(name: str) -> str:
    return _CAMEL_RE.sub(lambda m: m.group(1).upper(), name)


def snake(name: str) -> str:
    return _SNAKE_RE.sub(lambda m: "_" + m.group(1).lower(), name)


def encode_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Avatar):
        return value.value
    if isinstance(value, (ItemUsed, RepairImage)):
        return {k: encode_value(v) for k, v in value.to_wire().items()}
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (tuple, list)):
        return [encode_value(v) for v in value]
    return value


def to_record(entity: Any) -> Dict[str, Any]:
    record: Dict[str, Any] = {}
    for f in dataclasses.fields(entity):
        value = getattr(entity, f.name)
        if value is None:
            continue
        record[camel(f.name)] = encode_value(value)
    return record


def from_record(cls: Type[T], record: Mapping[str, Any]) -> T:
    """Build an entity from a stored record. Unknown keys are ignored."""
    names = {f.name for f in dataclasses.fields(cls)}
    values = {}
    for key, value in record.items():
        name = snake(key)
        if name in names:
            values[name] = value
    return cls(**values)
