"""
Hotel Maintenance Entities — Public API
==========================================
"""

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
from maintenance.entities.models import (
    DEFAULT_COLOR,
    Avatar,
    Damage,
    DateRange,
    Hotel,
    ItemUsed,
    PreventiveTask,
    RepairImage,
    Room,
    User,
    build,
    merge,
)
from maintenance.entities.stats import CategoryStats, MaintenanceStats, MonthlyStats

__all__ = [
    "AvatarKind",
    "DamageCategory",
    "DamagePriority",
    "DamageStatus",
    "Frequency",
    "ImageKind",
    "PreventiveStatus",
    "RoomStatus",
    "UserRole",
    "DEFAULT_COLOR",
    "Avatar",
    "Damage",
    "DateRange",
    "Hotel",
    "ItemUsed",
    "PreventiveTask",
    "RepairImage",
    "Room",
    "User",
    "build",
    "merge",
    "CategoryStats",
    "MaintenanceStats",
    "MonthlyStats",
]
