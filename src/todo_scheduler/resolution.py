"""Fixed-date resolution for deadlines, appointments and manual pins."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable

from todo_scheduler.durations import required_duration
from todo_scheduler.types import Deadline, FixedAppointment, Task

logger = logging.getLogger(__name__)


def reject_aware(dt: datetime, name: str) -> None:
    """Reject timezone-aware datetimes: the engine uses one local calendar."""
    if dt.tzinfo is not None:
        raise TypeError(
            f"{name} must be a naive datetime (no tzinfo), "
            f"got tzinfo={dt.tzinfo!r}. "
            f"All datetimes are assumed to be in local calendar time."
        )


@dataclass(frozen=True)
class ResolvedTask:
    """A task paired with the date it must occupy. Lives for one recompute."""

    task: Task
    target_date: date


def resolve_target_date(task: Task, today: date) -> date | None:
    """Compute the date a fixed or pinned task occupies.

    Precedence: manual pin, then fixed appointment, then deadline.
    Returns None when the date field the task needs is missing.

    - Manual pin: manual_date, clamped to today when in the past.
    - FixedAppointment: fixed_date, clamped to today when overdue.
    - Deadline: deadline_date - ceil(duration) days. Clamped to today only
      while the deadline itself is still ahead; once the deadline passed
      the buffered date is returned as is, even if in the past.
    """
    if task.manual_date is not None:
        return max(task.manual_date, today)

    payload = task.payload
    if isinstance(payload, FixedAppointment):
        if payload.fixed_date is None:
            return None
        return max(payload.fixed_date, today)

    if isinstance(payload, Deadline):
        if payload.deadline_date is None:
            return None
        buffer_days = math.ceil(required_duration(task))
        buffered = payload.deadline_date - timedelta(days=buffer_days)
        if buffered < today <= payload.deadline_date:
            return today
        return buffered

    return None


def resolve_fixed_tasks(tasks: Iterable[Task], today: date) -> list[ResolvedTask]:
    """Resolve every task with a usable date; the rest are left out."""
    resolved: list[ResolvedTask] = []
    for task in tasks:
        target = resolve_target_date(task, today)
        if target is None:
            logger.debug(
                "Task %r (%s) has no date to resolve; not scheduled",
                task.id, task.type.value,
            )
            continue
        resolved.append(ResolvedTask(task=task, target_date=target))
    return resolved
