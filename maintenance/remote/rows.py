"""
Hotel Maintenance Remote — Row Mapper
========================================
Pure, stateless translation between remote rows (flat dicts keyed by
column, nullable values) and entities.

Rules:
- row -> entity applies defaults for null columns and ignores columns
  it does not know
- partial -> row emits ONLY the keys present in the partial, so a
  partial update never nulls unrelated remote columns
- entity -> row -> entity is lossless
- password_hash is never written to a profile row
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping

from maintenance.entities import (
    DEFAULT_COLOR,
    Avatar,
    Damage,
    Hotel,
    ItemUsed,
    PreventiveTask,
    RepairImage,
    Room,
    User,
)

# field name → column name
HOTEL_COLUMNS = {
    "id": "id",
    "name": "name",
    "address": "address",
    "total_rooms": "total_rooms",
    "color": "color",
    "image": "image",
}

PROFILE_COLUMNS = {
    "id": "id",
    "name": "name",
    "role": "role",
    "phone": "phone",
    "email": "email",
    "color": "color",
    "avatar": "avatar",
    "can_delete": "can_delete",
}

DAMAGE_COLUMNS = {
    "id": "id",
    "hotel_id": "hotel_id",
    "room_number": "room_number",
    "category": "category",
    "description": "description",
    "status": "status",
    "priority": "priority",
    "reported_date": "reported_date",
    "completed_date": "completed_date",
    "cost": "cost",
    "materials": "materials",
    "items_used": "items_used",
    "notes": "notes",
    "reported_by": "reported_by",
    "assigned_to": "assigned_to",
    "images": "images",
    "hours_spent": "hours_spent",
    "last_edited_at": "last_edited_at",
}

ROOM_COLUMNS = {
    "hotel_id": "hotel_id",
    "number": "number",
    "floor": "floor",
    "type": "type",
    "status": "status",
}

PREVENTIVE_COLUMNS = {
    "id": "id",
    "hotel_id": "hotel_id",
    "room_number": "room_number",
    "category": "category",
    "title": "title",
    "description": "description",
    "frequency": "frequency",
    "next_due_date": "next_due_date",
    "last_completed_date": "last_completed_date",
    "assigned_to": "assigned_to",
    "status": "status",
}


# ══════════════════════════════════════════════════════════════
# VALUE ENCODING
# ══════════════════════════════════════════════════════════════

def _column_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Avatar):
        return value.value
    if isinstance(value, (ItemUsed, RepairImage)):
        return value.to_wire()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (tuple, list)):
        return [_column_value(v) for v in value]
    # Decimal stays Decimal; the HTTP client serializes it.
    return value


def _to_row(columns: Mapping[str, str], partial: Mapping[str, Any]) -> Dict[str, Any]:
    row: Dict[str, Any] = {}
    for name, value in partial.items():
        column = columns.get(name)
        if column is None:
            continue
        row[column] = _column_value(value)
    return row


def _as_partial(entity: Any) -> Dict[str, Any]:
    return {f.name: getattr(entity, f.name) for f in dataclasses.fields(entity)}


def _list(value: Any) -> list:
    return list(value) if isinstance(value, list) else []


# ══════════════════════════════════════════════════════════════
# HOTEL
# ══════════════════════════════════════════════════════════════

def hotel_from_row(row: Mapping[str, Any]) -> Hotel:
    return Hotel(
        id=str(row["id"]),
        name=row["name"],
        address=row.get("address") or "",
        total_rooms=row.get("total_rooms") or 0,
        color=row.get("color") or DEFAULT_COLOR,
        image=row.get("image") or None,
    )


def hotel_to_row(partial: Mapping[str, Any]) -> Dict[str, Any]:
    return _to_row(HOTEL_COLUMNS, partial)


# ══════════════════════════════════════════════════════════════
# USER (profiles table)
# ══════════════════════════════════════════════════════════════

def user_from_row(row: Mapping[str, Any]) -> User:
    return User(
        id=str(row["id"]),
        name=row["name"],
        role=row["role"],
        phone=row.get("phone") or "",
        email=row.get("email") or None,
        color=row.get("color") or DEFAULT_COLOR,
        avatar=Avatar.parse(row.get("avatar")),
        can_delete=bool(row.get("can_delete") or False),
    )


def user_to_row(partial: Mapping[str, Any]) -> Dict[str, Any]:
    return _to_row(PROFILE_COLUMNS, partial)


# ══════════════════════════════════════════════════════════════
# DAMAGE
# ══════════════════════════════════════════════════════════════

def damage_from_row(row: Mapping[str, Any]) -> Damage:
    return Damage(
        id=str(row["id"]),
        hotel_id=str(row["hotel_id"]),
        room_number=row["room_number"],
        category=row["category"],
        description=row.get("description") or "",
        status=row["status"],
        priority=row["priority"],
        reported_date=row["reported_date"],
        completed_date=row.get("completed_date") or None,
        cost=row.get("cost") if row.get("cost") is not None else 0,
        materials=_list(row.get("materials")),
        items_used=_list(row.get("items_used")),
        notes=row.get("notes") or "",
        reported_by=row.get("reported_by") or "",
        assigned_to=row.get("assigned_to") or None,
        images=_list(row.get("images")),
        hours_spent=row.get("hours_spent"),
        last_edited_at=row.get("last_edited_at") or None,
    )


def damage_to_row(partial: Mapping[str, Any]) -> Dict[str, Any]:
    return _to_row(DAMAGE_COLUMNS, partial)


# ══════════════════════════════════════════════════════════════
# ROOM
# ══════════════════════════════════════════════════════════════

def room_from_row(row: Mapping[str, Any]) -> Room:
    return Room(
        hotel_id=str(row["hotel_id"]),
        number=str(row["number"]),
        floor=row.get("floor") if row.get("floor") is not None else 1,
        type=row.get("type") or "Standard",
        status=row["status"],
    )


def room_to_row(partial: Mapping[str, Any]) -> Dict[str, Any]:
    return _to_row(ROOM_COLUMNS, partial)


# ══════════════════════════════════════════════════════════════
# PREVENTIVE MAINTENANCE
# ══════════════════════════════════════════════════════════════

def preventive_from_row(row: Mapping[str, Any]) -> PreventiveTask:
    return PreventiveTask(
        id=str(row["id"]),
        hotel_id=str(row["hotel_id"]),
        room_number=row.get("room_number") or None,
        category=row["category"],
        title=row["title"],
        description=row.get("description") or "",
        frequency=row["frequency"],
        next_due_date=row["next_due_date"],
        last_completed_date=row.get("last_completed_date") or None,
        assigned_to=row.get("assigned_to") or None,
        status=row["status"],
    )


def preventive_to_row(partial: Mapping[str, Any]) -> Dict[str, Any]:
    return _to_row(PREVENTIVE_COLUMNS, partial)


# ══════════════════════════════════════════════════════════════
# WHOLE ENTITIES
# ══════════════════════════════════════════════════════════════

_TO_ROW = {
    Hotel: hotel_to_row,
    User: user_to_row,
    Damage: damage_to_row,
    Room: room_to_row,
    PreventiveTask: preventive_to_row,
}

_FROM_ROW = {
    Hotel: hotel_from_row,
    User: user_from_row,
    Damage: damage_from_row,
    Room: room_from_row,
    PreventiveTask: preventive_from_row,
}


def row_from_entity(entity: Any) -> Dict[str, Any]:
    return _TO_ROW[type(entity)](_as_partial(entity))


def entity_from_row(cls: type, row: Mapping[str, Any]) -> Any:
    return _FROM_ROW[cls](row)
