"""
Hotel Maintenance Store — Damage Rules
=========================================
Date-range filtering and the completion invariant for repair tickets.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from maintenance.entities import Damage, DamageStatus, DateRange, ItemUsed
from maintenance.entities.coerce import to_enum


def filter_by_date_range(
    damages: Iterable[Damage],
    date_range: Optional[DateRange],
) -> List[Damage]:
    """Keep damages reported within the range, both ends included."""
    if date_range is None:
        return list(damages)
    return [d for d in damages if date_range.contains(d.reported_date)]


def _derive_materials(values: Dict[str, Any]) -> None:
    items = values.get("items_used")
    if items and not values.get("materials"):
        values["materials"] = [ItemUsed.from_wire(i).label for i in items]


def new_damage_values(data: Mapping[str, Any], today: date) -> Dict[str, Any]:
    """Caller data for a new ticket, with the completion invariant applied."""
    values = dict(data)
    _derive_materials(values)
    status = values.get("status", DamageStatus.PENDING)
    if to_enum(DamageStatus, status) == DamageStatus.COMPLETED:
        if not values.get("completed_date"):
            values["completed_date"] = today
    else:
        values["completed_date"] = None
    values.setdefault("cost", 0)
    values.setdefault("materials", [])
    return values


def damage_update_values(
    existing: Damage,
    updates: Mapping[str, Any],
    today: date,
    now: datetime,
) -> Dict[str, Any]:
    """
    Expand a partial update:
    - entering COMPLETED stamps completed_date (unless supplied)
    - leaving COMPLETED clears it
    - every edit stamps last_edited_at
    """
    values = dict(updates)
    if "items_used" in values and "materials" not in values:
        _derive_materials(values)

    if values.get("status") is not None:
        new_status = to_enum(DamageStatus, values["status"])
        if new_status == DamageStatus.COMPLETED:
            if not existing.is_completed and not values.get("completed_date"):
                values["completed_date"] = today
        elif existing.is_completed or existing.completed_date is not None:
            values["completed_date"] = None

    values["last_edited_at"] = now
    return values
