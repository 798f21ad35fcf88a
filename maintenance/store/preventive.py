"""
Hotel Maintenance Store — Preventive Task Rules
==================================================
Effective status is a pure function of (stored status, next due date,
today):

    due before today and status != completed   → overdue
    due today or later and status == overdue    → pending
    anything else                               → stored status

Completing a task (status → completed with no explicit completion
date) records today as the completion date, moves the due date one
frequency interval past it and reopens the task as pending.
"""

from __future__ import annotations

import calendar
import dataclasses
from datetime import date, timedelta
from typing import Any, Dict, Mapping

from maintenance.entities import Frequency, PreventiveStatus, PreventiveTask
from maintenance.entities.coerce import to_enum

_MONTHS = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.YEARLY: 12,
}


def add_months(day: date, months: int) -> date:
    """Calendar month arithmetic, clamped to the last day of the target month."""
    index = day.month - 1 + months
    year = day.year + index // 12
    month = index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def next_due_date(completed_on: date, frequency: Frequency) -> date:
    if frequency == Frequency.DAILY:
        return completed_on + timedelta(days=1)
    if frequency == Frequency.WEEKLY:
        return completed_on + timedelta(days=7)
    return add_months(completed_on, _MONTHS[frequency])


def effective_status(task: PreventiveTask, today: date) -> PreventiveStatus:
    if task.status != PreventiveStatus.COMPLETED and task.next_due_date < today:
        return PreventiveStatus.OVERDUE
    if task.status == PreventiveStatus.OVERDUE and task.next_due_date >= today:
        return PreventiveStatus.PENDING
    return task.status


def with_effective_status(task: PreventiveTask, today: date) -> PreventiveTask:
    status = effective_status(task, today)
    if status == task.status:
        return task
    return dataclasses.replace(task, status=status)


def completion_updates(
    task: PreventiveTask,
    updates: Mapping[str, Any],
    today: date,
) -> Dict[str, Any]:
    """Expand a partial update with the recurrence it triggers, if any."""
    result = dict(updates)
    status = result.get("status")
    if status is None:
        return result
    if to_enum(PreventiveStatus, status) != PreventiveStatus.COMPLETED:
        return result
    if result.get("last_completed_date"):
        return result

    frequency = to_enum(Frequency, result.get("frequency", task.frequency))
    result["last_completed_date"] = today
    result["next_due_date"] = next_due_date(today, frequency)
    result["status"] = PreventiveStatus.PENDING
    return result
