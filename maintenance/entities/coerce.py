"""
Hotel Maintenance Entities — Value Coercion
==============================================
Entity constructors accept either Python values or their wire form
(ISO strings, JSON numbers, lists). These helpers normalize both.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from django.utils.dateparse import parse_date, parse_datetime

E = TypeVar("E", bound=Enum)


def to_enum(enum_cls: Type[E], value: Any) -> E:
    if isinstance(value, enum_cls):
        return value
    return enum_cls(value)


def to_date(value: Any) -> date:
    """Accept date, datetime or an ISO date/datetime string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        parsed = parse_date(text[:10]) if len(text) >= 10 else None
        if parsed is not None:
            return parsed
    raise ValueError(f"Not a date: {value!r}")


def to_optional_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    return to_date(value)


def to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        parsed = parse_datetime(value.strip().replace("Z", "+00:00"))
        if parsed is not None:
            return parsed
    raise ValueError(f"Not a datetime: {value!r}")


def to_optional_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return to_datetime(value)


def to_decimal(value: Any) -> Decimal:
    """Money and hours are Decimal. Floats go through str() to keep their printed value."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError("Amount cannot be a boolean.")
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Not a decimal amount: {value!r}") from exc


def to_optional_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    return to_decimal(value)


def to_optional_str(value: Any) -> Optional[str]:
    """Empty strings collapse to None, the same as a missing column."""
    if value is None or value == "":
        return None
    return str(value)
