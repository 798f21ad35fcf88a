"""
Hotel Maintenance Entities — Enumerations
============================================
Enum values are the wire strings used by both local persistence and
the remote schema.
"""

from __future__ import annotations

from enum import Enum


class UserRole(Enum):
    """Privilege tiers, highest first."""
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    HANDYMAN = "handyman"


class RoomStatus(Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    OUT_OF_ORDER = "out-of-order"


class DamageCategory(Enum):
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    FURNITURE = "furniture"
    APPLIANCES = "appliances"
    STRUCTURAL = "structural"
    HVAC = "hvac"
    PAINTING = "painting"
    CLEANING = "cleaning"
    OTHER = "other"


class DamageStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DamagePriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ImageKind(Enum):
    BEFORE = "before"
    AFTER = "after"


class Frequency(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class PreventiveStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class AvatarKind(Enum):
    INITIALS = "initials"
    IMAGE = "image"
