"""
Hotel Maintenance Entities — Derived Statistics
==================================================
Computed on demand from damages; never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

from maintenance.entities.enums import DamageCategory


@dataclass(frozen=True)
class MaintenanceStats:
    total_repairs: int = 0
    pending_repairs: int = 0
    completed_this_month: int = 0
    total_expenses: Decimal = Decimal("0")
    average_repair_cost: Decimal = Decimal("0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRepairs": self.total_repairs,
            "pendingRepairs": self.pending_repairs,
            "completedThisMonth": self.completed_this_month,
            "totalExpenses": self.total_expenses,
            "averageRepairCost": self.average_repair_cost,
        }


@dataclass(frozen=True)
class CategoryStats:
    category: DamageCategory
    count: int = 0
    total_cost: Decimal = Decimal("0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "count": self.count,
            "totalCost": self.total_cost,
        }


@dataclass(frozen=True)
class MonthlyStats:
    month: str            # "Jan 2024"
    repairs: int = 0
    expenses: Decimal = Decimal("0")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "repairs": self.repairs,
            "expenses": self.expenses,
        }
