"""
Hotel Maintenance Store — Local Seed Data
============================================
What a fresh local store starts with: four hotels, four users (the
superadmin can sign in with the default password and should change
it), sample rooms and a handful of Skye tickets dated relative to
today. Preventive tasks start empty.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List

from maintenance.auth.passwords import hash_password
from maintenance.entities import (
    Avatar,
    Damage,
    DamageCategory,
    DamagePriority,
    DamageStatus,
    Hotel,
    PreventiveTask,
    Room,
    RoomStatus,
    User,
    UserRole,
)

DEFAULT_ADMIN_EMAIL = "alejandro@hotel.com"
DEFAULT_ADMIN_PASSWORD = "admin123"


def seed_hotels() -> List[Hotel]:
    return [
        Hotel("skye", "Skye", "123 Skyline Drive", 120, "#3b82f6"),
        Hotel("one-global", "One Global", "456 Global Avenue", 200, "#10b981"),
        Hotel("clarence", "The Clarence Hotel", "789 Clarence Street", 85, "#8b5cf6"),
        Hotel("woolstore", "Hotel Woolstore 1888", "321 Woolstore Road", 150, "#f59e0b"),
    ]


def seed_users() -> List[User]:
    return [
        User(
            id="user1",
            name="Alejandro Saldarriaga",
            role=UserRole.SUPERADMIN,
            phone="555-0101",
            email=DEFAULT_ADMIN_EMAIL,
            color="#dc2626",
            avatar=Avatar.initials("AS"),
            can_delete=True,
            password_hash=hash_password(DEFAULT_ADMIN_PASSWORD),
        ),
        User("user2", "Steven Ramirez", UserRole.ADMIN, "555-0102",
             "steven@hotel.com", "#3b82f6", Avatar.initials("SR")),
        User("user3", "Camilo Velasquez", UserRole.ADMIN, "555-0103",
             "camilo@hotel.com", "#10b981", Avatar.initials("CV")),
        User("user4", "Juan Saldarriaga", UserRole.ADMIN, "555-0104",
             "juan@hotel.com", "#f59e0b", Avatar.initials("JS")),
    ]


# hotel id → (number, floor, type, status)
_ROOMS: Dict[str, List[tuple]] = {
    "skye": [
        ("101", 1, "Standard", RoomStatus.AVAILABLE),
        ("102", 1, "Standard", RoomStatus.OCCUPIED),
        ("105", 1, "Deluxe", RoomStatus.AVAILABLE),
        ("115", 1, "Suite", RoomStatus.MAINTENANCE),
        ("205", 2, "Standard", RoomStatus.OCCUPIED),
        ("220", 2, "Deluxe", RoomStatus.AVAILABLE),
        ("310", 3, "Suite", RoomStatus.MAINTENANCE),
        ("402", 4, "Deluxe", RoomStatus.OCCUPIED),
    ],
    "one-global": [
        ("1001", 10, "Standard", RoomStatus.OCCUPIED),
        ("1010", 10, "Deluxe", RoomStatus.AVAILABLE),
        ("1105", 11, "Suite", RoomStatus.MAINTENANCE),
        ("1212", 12, "Standard", RoomStatus.OCCUPIED),
    ],
    "clarence": [
        ("3", 1, "Standard", RoomStatus.AVAILABLE),
        ("8", 1, "Suite", RoomStatus.MAINTENANCE),
        ("22", 2, "Deluxe", RoomStatus.OCCUPIED),
        ("30", 2, "Deluxe", RoomStatus.OUT_OF_ORDER),
    ],
    "woolstore": [
        ("101", 1, "Standard", RoomStatus.OCCUPIED),
        ("125", 1, "Standard", RoomStatus.MAINTENANCE),
        ("220", 2, "Suite", RoomStatus.AVAILABLE),
        ("310", 3, "Suite", RoomStatus.OCCUPIED),
    ],
}


def seed_rooms() -> List[Room]:
    return [
        Room(hotel_id, number, floor, room_type, status)
        for hotel_id, rooms in _ROOMS.items()
        for number, floor, room_type, status in rooms
    ]


def seed_damages(today: date) -> List[Damage]:
    def ago(days: int) -> date:
        return today - timedelta(days=days)

    return [
        Damage(
            id="s1", hotel_id="skye", room_number="101",
            category=DamageCategory.PLUMBING,
            description="Leaking faucet in bathroom sink",
            status=DamageStatus.COMPLETED, priority=DamagePriority.MEDIUM,
            reported_date=ago(45), completed_date=ago(44),
            cost=Decimal("45.50"),
            materials=("Faucet washer", "Plumber tape", "Silicone sealant"),
            notes="Replaced washer and sealed connections",
            reported_by="Alejandro Saldarriaga", assigned_to="Alejandro Saldarriaga",
        ),
        Damage(
            id="s2", hotel_id="skye", room_number="205",
            category=DamageCategory.ELECTRICAL,
            description="Light fixture not working in bedroom",
            status=DamageStatus.COMPLETED, priority=DamagePriority.LOW,
            reported_date=ago(38), completed_date=ago(38),
            cost=Decimal("25.00"),
            materials=("LED bulb", "Wire connectors"),
            notes="Replaced faulty bulb",
            reported_by="Steven Ramirez", assigned_to="Steven Ramirez",
        ),
        Damage(
            id="s3", hotel_id="skye", room_number="310",
            category=DamageCategory.FURNITURE,
            description="Broken chair leg in dining area",
            status=DamageStatus.COMPLETED, priority=DamagePriority.MEDIUM,
            reported_date=ago(30), completed_date=ago(28),
            cost=Decimal("80.00"),
            materials=("Wood glue", "Screws", "Wood filler"),
            notes="Repaired and reinforced chair leg",
            reported_by="Camilo Velasquez", assigned_to="Alejandro Saldarriaga",
        ),
        Damage(
            id="s4", hotel_id="skye", room_number="115",
            category=DamageCategory.APPLIANCES,
            description="Mini fridge not cooling",
            status=DamageStatus.IN_PROGRESS, priority=DamagePriority.HIGH,
            reported_date=ago(3),
            reported_by="Juan Saldarriaga", assigned_to="Camilo Velasquez",
        ),
        Damage(
            id="s5", hotel_id="skye", room_number="402",
            category=DamageCategory.HVAC,
            description="Air conditioner rattling at night",
            status=DamageStatus.PENDING, priority=DamagePriority.URGENT,
            reported_date=ago(1),
            reported_by="Steven Ramirez",
        ),
    ]


def seed_preventive() -> List[PreventiveTask]:
    return []
