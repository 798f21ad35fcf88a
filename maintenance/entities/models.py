"""
Hotel Maintenance Entities — Domain Records
==============================================
Typed, immutable records for every entity the store owns.

Every domain record references its hotel by `hotel_id` only; there are
no back-references. Records are frozen: callers never mutate what the
store hands out, they go through the store's update operations.

Constructors accept wire values (ISO strings, JSON numbers, lists) and
coerce them, so the same constructor serves local persistence, remote
rows and Python callers.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Tuple, Type, TypeVar

from maintenance.entities.coerce import (
    to_date,
    to_decimal,
    to_enum,
    to_optional_date,
    to_optional_datetime,
    to_optional_decimal,
    to_optional_str,
)
from maintenance.entities.enums import (
    AvatarKind,
    DamageCategory,
    DamagePriority,
    DamageStatus,
    Frequency,
    ImageKind,
    PreventiveStatus,
    RoomStatus,
    UserRole,
)

DEFAULT_COLOR = "#3b82f6"
DEFAULT_ROOM_TYPE = "Standard"

T = TypeVar("T")


def _set(obj: Any, name: str, value: Any) -> None:
    object.__setattr__(obj, name, value)


# ══════════════════════════════════════════════════════════════
# HOTEL
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Hotel:
    """Root aggregate. Everything else points at a hotel by id."""

    id: str
    name: str
    address: str = ""
    total_rooms: int = 0
    color: str = DEFAULT_COLOR
    image: Optional[str] = None

    def __post_init__(self):
        _set(self, "total_rooms", int(self.total_rooms or 0))
        _set(self, "address", self.address or "")
        _set(self, "color", self.color or DEFAULT_COLOR)
        _set(self, "image", to_optional_str(self.image))


# ══════════════════════════════════════════════════════════════
# USER
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Avatar:
    """
    Either textual initials or an image reference.

    The image/initials decision is made once, by parse(), where the raw
    value enters the system. Display code switches on `kind`.
    """

    kind: AvatarKind
    value: str

    @classmethod
    def initials(cls, text: str) -> "Avatar":
        return cls(AvatarKind.INITIALS, text)

    @classmethod
    def image(cls, url: str) -> "Avatar":
        return cls(AvatarKind.IMAGE, url)

    @classmethod
    def parse(cls, raw: Any) -> Optional["Avatar"]:
        if raw is None or raw == "":
            return None
        if isinstance(raw, Avatar):
            return raw
        text = str(raw)
        if text.startswith("data:") or text.startswith("http"):
            return cls.image(text)
        return cls.initials(text)

    @property
    def is_image(self) -> bool:
        return self.kind == AvatarKind.IMAGE

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class User:
    id: str
    name: str
    role: UserRole
    phone: str = ""
    email: Optional[str] = None
    color: str = DEFAULT_COLOR
    avatar: Optional[Avatar] = None
    can_delete: bool = False
    # Local auth only; never sent to the remote backend.
    password_hash: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        _set(self, "role", to_enum(UserRole, self.role))
        _set(self, "phone", self.phone or "")
        _set(self, "email", to_optional_str(self.email))
        _set(self, "color", self.color or DEFAULT_COLOR)
        _set(self, "avatar", Avatar.parse(self.avatar))
        _set(self, "can_delete", bool(self.can_delete))
        _set(self, "password_hash", to_optional_str(self.password_hash))

    @property
    def is_superadmin(self) -> bool:
        return self.role == UserRole.SUPERADMIN

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.SUPERADMIN, UserRole.ADMIN)


# ══════════════════════════════════════════════════════════════
# ROOM
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Room:
    """Fixed inventory keyed by (hotel_id, number). Only status changes."""

    hotel_id: str
    number: str
    floor: int = 1
    type: str = DEFAULT_ROOM_TYPE
    status: RoomStatus = RoomStatus.AVAILABLE

    def __post_init__(self):
        _set(self, "number", str(self.number))
        _set(self, "floor", int(self.floor if self.floor is not None else 1))
        _set(self, "type", self.type or DEFAULT_ROOM_TYPE)
        _set(self, "status", to_enum(RoomStatus, self.status))

    @property
    def key(self) -> Tuple[str, str]:
        return (self.hotel_id, self.number)


# ══════════════════════════════════════════════════════════════
# DAMAGE (repair ticket)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ItemUsed:
    name: str
    brand: Optional[str] = None
    estimated_cost: Optional[Decimal] = None

    def __post_init__(self):
        _set(self, "brand", to_optional_str(self.brand))
        _set(self, "estimated_cost", to_optional_decimal(self.estimated_cost))

    @classmethod
    def from_wire(cls, value: Any) -> "ItemUsed":
        if isinstance(value, ItemUsed):
            return value
        return cls(
            name=value["name"],
            brand=value.get("brand"),
            estimated_cost=value.get("estimatedCost"),
        )

    def to_wire(self) -> dict:
        data: dict = {"name": self.name}
        if self.brand is not None:
            data["brand"] = self.brand
        if self.estimated_cost is not None:
            data["estimatedCost"] = self.estimated_cost
        return data

    @property
    def label(self) -> str:
        return f"{self.name} ({self.brand})" if self.brand else self.name


@dataclass(frozen=True)
class RepairImage:
    kind: ImageKind
    url: str
    uploaded_at: Optional[datetime] = None

    def __post_init__(self):
        _set(self, "kind", to_enum(ImageKind, self.kind))
        _set(self, "uploaded_at", to_optional_datetime(self.uploaded_at))

    @classmethod
    def from_wire(cls, value: Any) -> "RepairImage":
        if isinstance(value, RepairImage):
            return value
        # Older records store bare URLs.
        if isinstance(value, str):
            return cls(ImageKind.BEFORE, value)
        return cls(
            kind=value.get("type", ImageKind.BEFORE.value),
            url=value["url"],
            uploaded_at=value.get("uploadedAt"),
        )

    def to_wire(self) -> dict:
        data: dict = {"type": self.kind.value, "url": self.url}
        if self.uploaded_at is not None:
            data["uploadedAt"] = self.uploaded_at.isoformat()
        return data


@dataclass(frozen=True)
class Damage:
    """
    A repair ticket.

    completed_date is set exactly when status is COMPLETED (the store
    stamps it on transition). cost and materials are always present.
    """

    id: str
    hotel_id: str
    room_number: str
    category: DamageCategory
    description: str
    status: DamageStatus
    priority: DamagePriority
    reported_date: date
    completed_date: Optional[date] = None
    cost: Decimal = Decimal("0")
    materials: Tuple[str, ...] = ()
    items_used: Tuple[ItemUsed, ...] = ()
    notes: str = ""
    reported_by: str = ""
    assigned_to: Optional[str] = None
    images: Tuple[RepairImage, ...] = ()
    hours_spent: Optional[Decimal] = None
    last_edited_at: Optional[datetime] = None

    def __post_init__(self):
        _set(self, "room_number", str(self.room_number))
        _set(self, "category", to_enum(DamageCategory, self.category))
        _set(self, "status", to_enum(DamageStatus, self.status))
        _set(self, "priority", to_enum(DamagePriority, self.priority))
        _set(self, "reported_date", to_date(self.reported_date))
        _set(self, "completed_date", to_optional_date(self.completed_date))
        _set(self, "cost", to_decimal(self.cost))
        _set(self, "materials", tuple(self.materials or ()))
        _set(self, "items_used", tuple(ItemUsed.from_wire(i) for i in self.items_used or ()))
        _set(self, "notes", self.notes or "")
        _set(self, "reported_by", self.reported_by or "")
        _set(self, "assigned_to", to_optional_str(self.assigned_to))
        _set(self, "images", tuple(RepairImage.from_wire(i) for i in self.images or ()))
        _set(self, "hours_spent", to_optional_decimal(self.hours_spent))
        _set(self, "last_edited_at", to_optional_datetime(self.last_edited_at))

    @property
    def is_completed(self) -> bool:
        return self.status == DamageStatus.COMPLETED


# ══════════════════════════════════════════════════════════════
# PREVENTIVE MAINTENANCE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PreventiveTask:
    """
    A recurring maintenance action. room_number None means hotel-wide.

    `status` is what was last persisted; the store recomputes the
    effective status (overdue / pending) on every read.
    """

    id: str
    hotel_id: str
    category: DamageCategory
    title: str
    frequency: Frequency
    next_due_date: date
    room_number: Optional[str] = None
    description: str = ""
    last_completed_date: Optional[date] = None
    assigned_to: Optional[str] = None
    status: PreventiveStatus = PreventiveStatus.PENDING

    def __post_init__(self):
        _set(self, "category", to_enum(DamageCategory, self.category))
        _set(self, "frequency", to_enum(Frequency, self.frequency))
        _set(self, "next_due_date", to_date(self.next_due_date))
        _set(self, "room_number", to_optional_str(self.room_number))
        _set(self, "description", self.description or "")
        _set(self, "last_completed_date", to_optional_date(self.last_completed_date))
        _set(self, "assigned_to", to_optional_str(self.assigned_to))
        _set(self, "status", to_enum(PreventiveStatus, self.status))


# ══════════════════════════════════════════════════════════════
# DATE RANGE
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DateRange:
    """Inclusive on both ends."""

    start: date
    end: date

    def __post_init__(self):
        _set(self, "start", to_date(self.start))
        _set(self, "end", to_date(self.end))

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


# ══════════════════════════════════════════════════════════════
# CONSTRUCTION / PARTIAL UPDATES
# ══════════════════════════════════════════════════════════════

def field_names(cls: Type[Any]) -> Tuple[str, ...]:
    return tuple(f.name for f in dataclasses.fields(cls))


def _check_fields(cls: Type[Any], keys) -> None:
    known = set(field_names(cls))
    unknown = sorted(set(keys) - known)
    if unknown:
        raise ValueError(f"{cls.__name__} has no field(s): {', '.join(unknown)}")


def build(cls: Type[T], data: Mapping[str, Any], **identity: Any) -> T:
    """Create a record from caller data plus store-assigned identity."""
    _check_fields(cls, data)
    values = {k: v for k, v in data.items() if k not in identity}
    values.update(identity)
    return cls(**values)


def merge(record: T, updates: Mapping[str, Any], *, identity: Tuple[str, ...] = ("id",)) -> T:
    """
    Apply a partial update. Identity fields are kept as they are.

    Raises ValueError on field names the record does not have.
    """
    _check_fields(type(record), updates)
    changes = {k: v for k, v in updates.items() if k not in identity}
    if not changes:
        return record
    return dataclasses.replace(record, **changes)
