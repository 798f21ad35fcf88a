"""
Tests — Derived Statistics
=============================
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from maintenance.entities import DamageCategory, Damage, DateRange
from maintenance.store.stats import (
    category_stats,
    maintenance_stats,
    month_label,
    month_starts,
    monthly_stats,
)

TODAY = date(2024, 3, 15)


def _damage(n, category="plumbing", status="pending", cost="0", reported="2024-03-01", completed=None):
    return Damage(
        id=f"d{n}", hotel_id="skye", room_number="101", category=category,
        description="", status=status, priority="medium",
        reported_date=reported, completed_date=completed, cost=cost,
    )


MIXED = [
    _damage(1, "plumbing", "completed", "45.50", "2024-01-01", "2024-01-02"),
    _damage(2, "plumbing", "pending", "99.00"),
    _damage(3, "electrical", "completed", "20.00", "2024-03-01", "2024-03-03"),
    _damage(4, "hvac", "in-progress", "10.00"),
    _damage(5, "plumbing", "cancelled", "5.00"),
    _damage(6, "electrical", "completed", "30.00", "2024-02-01", "2024-02-10"),
]


class TestMaintenanceStats:
    def test_skye_single_completed_damage(self):
        damages = [_damage(1, "plumbing", "completed", "45.50", "2024-01-01", "2024-01-02")]
        stats = maintenance_stats(damages, TODAY)
        assert stats.total_repairs == 1
        assert stats.pending_repairs == 0
        assert stats.total_expenses == Decimal("45.50")
        assert stats.average_repair_cost == Decimal("45.50")
        assert stats.completed_this_month == 0

    def test_completed_this_month_in_january_2024(self):
        damages = [_damage(1, "plumbing", "completed", "45.50", "2024-01-01", "2024-01-02")]
        assert maintenance_stats(damages, date(2024, 1, 20)).completed_this_month == 1

    def test_same_month_other_year_does_not_count(self):
        damages = [_damage(1, "plumbing", "completed", "1", "2023-03-01", "2023-03-02")]
        assert maintenance_stats(damages, TODAY).completed_this_month == 0

    def test_mixed_statuses(self):
        stats = maintenance_stats(MIXED, TODAY)
        assert stats.total_repairs == 6
        assert stats.pending_repairs == 1
        assert stats.completed_this_month == 1
        assert stats.total_expenses == Decimal("95.50")
        assert stats.average_repair_cost == Decimal("95.50") / 3

    def test_no_completed_means_zero_average(self):
        stats = maintenance_stats([_damage(1)], TODAY)
        assert stats.total_expenses == Decimal("0")
        assert stats.average_repair_cost == Decimal("0")

    def test_empty(self):
        stats = maintenance_stats([], TODAY)
        assert stats.total_repairs == 0
        assert stats.to_dict()["averageRepairCost"] == Decimal("0")


class TestCategoryStats:
    def test_counts_all_costs_completed_only(self):
        by_cat = {s.category: s for s in category_stats(MIXED)}
        assert by_cat[DamageCategory.PLUMBING].count == 3
        assert by_cat[DamageCategory.PLUMBING].total_cost == Decimal("45.50")
        assert by_cat[DamageCategory.ELECTRICAL].total_cost == Decimal("50.00")
        assert by_cat[DamageCategory.HVAC].total_cost == Decimal("0")

    def test_sorted_by_count_descending_ties_stable(self):
        order = [s.category for s in category_stats(MIXED)]
        assert order == [DamageCategory.PLUMBING, DamageCategory.ELECTRICAL, DamageCategory.HVAC]

    def test_consistent_with_maintenance_stats(self):
        cats = category_stats(MIXED)
        stats = maintenance_stats(MIXED, TODAY)
        assert sum(c.count for c in cats) == stats.total_repairs
        assert sum((c.total_cost for c in cats), Decimal("0")) == stats.total_expenses

    def test_wire_shape(self):
        stat = category_stats([_damage(1, "hvac", "completed", "3", completed="2024-03-02")])[0]
        assert stat.to_dict() == {"category": "hvac", "count": 1, "totalCost": Decimal("3")}


class TestMonthlyStats:
    def test_label_format(self):
        assert month_label(date(2024, 1, 31)) == "Jan 2024"

    def test_default_window_is_six_months_ending_now(self):
        labels = [m.month for m in monthly_stats([], TODAY)]
        assert labels == ["Oct 2023", "Nov 2023", "Dec 2023", "Jan 2024", "Feb 2024", "Mar 2024"]

    def test_completed_damages_bucket_by_completion_month(self):
        stats = {m.month: m for m in monthly_stats(MIXED, TODAY)}
        assert stats["Jan 2024"].repairs == 1
        assert stats["Jan 2024"].expenses == Decimal("45.50")
        assert stats["Feb 2024"].expenses == Decimal("30.00")
        assert stats["Mar 2024"].repairs == 1
        assert stats["Dec 2023"].repairs == 0

    def test_explicit_range_spans_every_month(self):
        r = DateRange("2023-11-20", "2024-02-03")
        assert [d for d in month_starts(TODAY, r)] == [
            date(2023, 11, 1), date(2023, 12, 1), date(2024, 1, 1), date(2024, 2, 1),
        ]

    def test_completion_outside_buckets_is_dropped(self):
        damages = [_damage(1, "plumbing", "completed", "10", "2024-01-30", "2024-03-02")]
        r = DateRange("2024-01-01", "2024-01-31")
        stats = monthly_stats(damages, TODAY, r)
        assert [m.month for m in stats] == ["Jan 2024"]
        assert stats[0].repairs == 0

    def test_non_completed_never_counted(self):
        damages = [_damage(1, "plumbing", "cancelled", "10", completed="2024-03-02")]
        assert all(m.repairs == 0 for m in monthly_stats(damages, TODAY))
