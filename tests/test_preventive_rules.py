"""
Tests — Preventive Task Recurrence and Effective Status
=========================================================
"""

from __future__ import annotations

from datetime import date

import pytest

from maintenance.entities import Frequency, PreventiveStatus, PreventiveTask
from maintenance.store.preventive import (
    add_months,
    completion_updates,
    effective_status,
    next_due_date,
    with_effective_status,
)


def _task(status="pending", due="2024-01-15", frequency="monthly"):
    return PreventiveTask(
        id="p1", hotel_id="skye", category="hvac", title="Filters",
        frequency=frequency, next_due_date=due, status=status,
    )


class TestEffectiveStatus:
    def test_past_due_pending_is_overdue(self):
        assert effective_status(_task(), date(2024, 2, 1)) is PreventiveStatus.OVERDUE

    def test_past_due_in_progress_is_overdue(self):
        task = _task(status="in-progress")
        assert effective_status(task, date(2024, 2, 1)) is PreventiveStatus.OVERDUE

    def test_past_due_completed_stays_completed(self):
        task = _task(status="completed")
        assert effective_status(task, date(2024, 2, 1)) is PreventiveStatus.COMPLETED

    def test_overdue_with_future_due_reverts_to_pending(self):
        task = _task(status="overdue", due="2024-03-01")
        assert effective_status(task, date(2024, 2, 1)) is PreventiveStatus.PENDING

    def test_due_today_is_not_overdue(self):
        assert effective_status(_task(), date(2024, 1, 15)) is PreventiveStatus.PENDING

    @pytest.mark.parametrize("stored", ["pending", "in-progress", "completed"])
    def test_future_due_passes_stored_status_through(self, stored):
        task = _task(status=stored, due="2024-03-01")
        assert effective_status(task, date(2024, 2, 1)).value == stored

    def test_recompute_is_idempotent(self):
        today = date(2024, 2, 1)
        once = with_effective_status(_task(), today)
        twice = with_effective_status(once, today)
        assert once == twice
        assert once.status is PreventiveStatus.OVERDUE

    def test_unchanged_task_is_returned_as_is(self):
        task = _task(due="2024-03-01")
        assert with_effective_status(task, date(2024, 2, 1)) is task


class TestRecurrence:
    @pytest.mark.parametrize(
        "frequency, expected",
        [
            (Frequency.DAILY, date(2024, 1, 6)),
            (Frequency.WEEKLY, date(2024, 1, 12)),
            (Frequency.MONTHLY, date(2024, 2, 5)),
            (Frequency.QUARTERLY, date(2024, 4, 5)),
            (Frequency.YEARLY, date(2025, 1, 5)),
        ],
    )
    def test_next_due_date_per_frequency(self, frequency, expected):
        assert next_due_date(date(2024, 1, 5), frequency) == expected

    def test_month_end_clamps(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
        assert add_months(date(2024, 2, 29), 12) == date(2025, 2, 28)

    def test_negative_months_cross_year(self):
        assert add_months(date(2024, 3, 1), -5) == date(2023, 10, 1)

    def test_weekly_completion_rolls_forward(self):
        task = _task(due="2024-01-01", frequency="weekly")
        updates = completion_updates(task, {"status": "completed"}, date(2024, 1, 5))
        assert updates == {
            "status": PreventiveStatus.PENDING,
            "last_completed_date": date(2024, 1, 5),
            "next_due_date": date(2024, 1, 12),
        }

    def test_explicit_completion_date_skips_recurrence(self):
        task = _task()
        updates = {"status": "completed", "last_completed_date": "2024-01-03"}
        assert completion_updates(task, updates, date(2024, 1, 5)) == updates

    def test_non_completion_updates_pass_through(self):
        assert completion_updates(_task(), {"title": "New"}, date(2024, 1, 5)) == {"title": "New"}
        assert completion_updates(_task(), {"status": "in-progress"}, date(2024, 1, 5)) == {
            "status": "in-progress"
        }

    def test_frequency_in_same_update_wins(self):
        task = _task(frequency="yearly")
        updates = completion_updates(
            task, {"status": "completed", "frequency": "daily"}, date(2024, 1, 5)
        )
        assert updates["next_due_date"] == date(2024, 1, 6)
