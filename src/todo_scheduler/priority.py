"""Priority ordering for task sequencing.

Precedence (first decisive rule wins):
    1. FixedAppointment before everything else
    2. Deadline before BenefitDuration
    3. Same fixed type: resolved date ascending; appointments on the same
       date by fixed_time ("00:00" when missing). Deadlines on the same
       date keep their input order.
    4. With calc_priority: benefit per hour descending, when either is > 0
    5. Otherwise keep input order (sorting is stable)
"""

from __future__ import annotations

from datetime import date
from functools import cmp_to_key
from typing import Iterable, Mapping

from todo_scheduler.durations import benefit_per_hour
from todo_scheduler.resolution import ResolvedTask
from todo_scheduler.types import FixedAppointment, Task, TaskType

_FIXED_TYPES = (TaskType.FIXED_APPOINTMENT, TaskType.DEADLINE)


def _fixed_time(task: Task) -> str:
    payload = task.payload
    if isinstance(payload, FixedAppointment) and payload.fixed_time:
        return payload.fixed_time
    return "00:00"


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def compare_tasks(
    a: Task,
    b: Task,
    *,
    calc_priority: bool,
    target_dates: Mapping[str, date] | None = None,
) -> int:
    """Three-way comparison of two tasks. Negative means `a` goes first."""
    a_type, b_type = a.type, b.type

    for leading in _FIXED_TYPES:
        if a_type is leading and b_type is not leading:
            return -1
        if b_type is leading and a_type is not leading:
            return 1

    if a_type is b_type and a_type in _FIXED_TYPES:
        dates = target_dates or {}
        date_a, date_b = dates.get(a.id), dates.get(b.id)
        if date_a is None or date_b is None:
            return 0
        if date_a == date_b and a_type is TaskType.FIXED_APPOINTMENT:
            return _cmp(_fixed_time(a), _fixed_time(b))
        return _cmp(date_a, date_b)

    if calc_priority:
        benefit_a, benefit_b = benefit_per_hour(a), benefit_per_hour(b)
        if benefit_a > 0 or benefit_b > 0:
            return _cmp(benefit_b, benefit_a)

    return 0


def priority_sort(
    tasks: Iterable[Task],
    *,
    calc_priority: bool,
    target_dates: Mapping[str, date] | None = None,
) -> list[Task]:
    """Return tasks in priority order. Ties keep their input order."""
    key = cmp_to_key(
        lambda a, b: compare_tasks(
            a, b, calc_priority=calc_priority, target_dates=target_dates
        )
    )
    return sorted(tasks, key=key)


def _compare_resolved(a: ResolvedTask, b: ResolvedTask) -> int:
    if a.target_date != b.target_date:
        return _cmp(a.target_date, b.target_date)
    if (
        a.task.type is TaskType.FIXED_APPOINTMENT
        and b.task.type is TaskType.FIXED_APPOINTMENT
    ):
        return _cmp(_fixed_time(a.task), _fixed_time(b.task))
    return 0


def fixed_task_order(resolved: Iterable[ResolvedTask]) -> list[ResolvedTask]:
    """Order resolved fixed tasks by date, then appointment time. Stable."""
    return sorted(resolved, key=cmp_to_key(_compare_resolved))
