"""
Hotel Maintenance Store — Derived Statistics
===============================================
Pure computations over an already-filtered list of damages.

Rules:
- completed_this_month looks at completed_date against TODAY's month,
  whatever date range filtered the input
- expenses only ever count COMPLETED tickets
- monthly buckets are fixed up front; a completion in a month with no
  bucket is dropped, never appended
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from django.utils import dateformat

from maintenance.entities import (
    CategoryStats,
    Damage,
    DamageStatus,
    DateRange,
    MaintenanceStats,
    MonthlyStats,
)
from maintenance.store.preventive import add_months

DEFAULT_MONTHS = 6
MONTH_LABEL_FORMAT = "M Y"


def month_label(day: date) -> str:
    """Short month and year, e.g. "Jan 2024"."""
    return dateformat.format(day, MONTH_LABEL_FORMAT)


def _completed(damages: Iterable[Damage]) -> List[Damage]:
    return [d for d in damages if d.status == DamageStatus.COMPLETED]


def maintenance_stats(damages: Iterable[Damage], today: date) -> MaintenanceStats:
    damages = list(damages)
    completed = _completed(damages)
    total_expenses = sum((d.cost for d in completed), Decimal("0"))
    this_month = sum(
        1
        for d in damages
        if d.completed_date is not None
        and d.completed_date.year == today.year
        and d.completed_date.month == today.month
    )
    return MaintenanceStats(
        total_repairs=len(damages),
        pending_repairs=sum(1 for d in damages if d.status == DamageStatus.PENDING),
        completed_this_month=this_month,
        total_expenses=total_expenses,
        average_repair_cost=(
            total_expenses / len(completed) if completed else Decimal("0")
        ),
    )


def category_stats(damages: Iterable[Damage]) -> List[CategoryStats]:
    """One entry per category present, most frequent first."""
    counts: Dict = {}
    costs: Dict = {}
    for d in damages:
        counts[d.category] = counts.get(d.category, 0) + 1
        costs.setdefault(d.category, Decimal("0"))
        if d.status == DamageStatus.COMPLETED:
            costs[d.category] += d.cost
    result = [
        CategoryStats(category=c, count=counts[c], total_cost=costs[c])
        for c in counts
    ]
    # sorted() is stable: ties keep first-seen order.
    return sorted(result, key=lambda s: s.count, reverse=True)


def month_starts(today: date, date_range: Optional[DateRange]) -> List[date]:
    if date_range is None:
        first = add_months(today.replace(day=1), -(DEFAULT_MONTHS - 1))
        count = DEFAULT_MONTHS
    else:
        first = date_range.start.replace(day=1)
        end = date_range.end
        count = (end.year - first.year) * 12 + (end.month - first.month) + 1
    return [add_months(first, i) for i in range(max(count, 0))]


def monthly_stats(
    damages: Iterable[Damage],
    today: date,
    date_range: Optional[DateRange] = None,
) -> List[MonthlyStats]:
    buckets: Dict[tuple, List] = {
        (m.year, m.month): [m, 0, Decimal("0")] for m in month_starts(today, date_range)
    }
    for d in _completed(damages):
        if d.completed_date is None:
            continue
        bucket = buckets.get((d.completed_date.year, d.completed_date.month))
        if bucket is None:
            continue
        bucket[1] += 1
        bucket[2] += d.cost
    return [
        MonthlyStats(month=month_label(start), repairs=repairs, expenses=expenses)
        for start, repairs, expenses in buckets.values()
    ]
