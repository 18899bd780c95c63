"""Allocation layer: DayLedger for per-day capacity tracking.

Provides place_fixed (single unsplit item on a resolved date) and
allocate_flexible (greedy day-by-day walk that splits a task across days).
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from todo_scheduler.durations import EPSILON, HORIZON_DAYS, required_duration
from todo_scheduler.types import (
    BenefitDuration,
    Deadline,
    FixedAppointment,
    ScheduleIdAllocator,
    ScheduleItem,
    Task,
)

if TYPE_CHECKING:
    from todo_scheduler.calendar import WeeklyAvailability
    from todo_scheduler.resolution import ResolvedTask

logger = logging.getLogger(__name__)

SPLIT_SUFFIX = " (Teil {index})"
UNSCHEDULABLE_SUFFIX = " (Nicht planbar - Keine Kapazität)"


class DayLedger:
    """Mutable capacity state for one recompute.

    consumed[d] = hours already booked on d by emitted schedule items.
    Free hours on a day are its availability minus what is consumed.
    """

    def __init__(self, availability: WeeklyAvailability, now: datetime) -> None:
        self.availability = availability
        self.now = now
        self._consumed: defaultdict[date, float] = defaultdict(float)

    def consumed_hours(self, d: date) -> float:
        return self._consumed.get(d, 0.0)

    def free_hours(self, d: date) -> float:
        """Capacity left on `d`. May be negative when fixed work overbooks a day."""
        return self.availability.available_hours(d, self.now) - self.consumed_hours(d)

    def record(self, item: ScheduleItem) -> None:
        """Book a dated item. Unschedulable items consume nothing."""
        if item.planned_date is not None:
            self._consumed[item.planned_date] += item.scheduled_duration


def _base_fields(task: Task) -> dict:
    """Display fields carried from the task onto each of its schedule items."""
    fields: dict = {
        "task_id": task.id,
        "type": task.type,
        "assigned_to": task.assigned_to,
        "notes": task.notes,
        "location": task.location,
    }
    payload = task.payload
    if isinstance(payload, BenefitDuration):
        fields["financial_benefit"] = payload.financial_benefit
        fields["estimated_duration"] = payload.estimated_duration
    elif isinstance(payload, Deadline):
        fields["deadline_date"] = payload.deadline_date
    elif isinstance(payload, FixedAppointment):
        fields["fixed_date"] = payload.fixed_date
        fields["fixed_time"] = payload.fixed_time
    return fields


def place_fixed(
    resolved: ResolvedTask,
    ledger: DayLedger,
    next_id: ScheduleIdAllocator,
) -> ScheduleItem:
    """Place a fixed or pinned task on its resolved date. Never split."""
    task = resolved.task
    item = ScheduleItem(
        schedule_id=next_id(task.id),
        description=task.description,
        planned_date=resolved.target_date,
        scheduled_duration=required_duration(task),
        is_manually_scheduled=task.is_manually_scheduled,
        **_base_fields(task),
    )
    ledger.record(item)
    return item


def allocate_flexible(
    task: Task,
    ledger: DayLedger,
    today: date,
    next_id: ScheduleIdAllocator,
) -> list[ScheduleItem]:
    """Greedy consumption of daily capacity, starting today.

    Each day with free capacity takes min(remaining, free) hours. A task
    that needs more than one fragment gets " (Teil N)" on every fragment.
    Whatever is still unplaced after HORIZON_DAYS becomes one item with
    no date. Every emitted item is booked in the ledger straight away.
    """
    base = _base_fields(task)
    remaining = required_duration(task)
    items: list[ScheduleItem] = []

    if remaining <= EPSILON:
        item = ScheduleItem(
            schedule_id=next_id(task.id),
            description=task.description,
            planned_date=today,
            scheduled_duration=0.0,
            **base,
        )
        ledger.record(item)
        return [item]

    day_offset = 0
    part_index = 1

    while remaining > EPSILON:
        if day_offset > HORIZON_DAYS:
            logger.warning(
                "Task %r: %.2fh could not be placed within %d days",
                task.id, remaining, HORIZON_DAYS,
            )
            items.append(
                ScheduleItem(
                    schedule_id=next_id(task.id),
                    description=task.description + UNSCHEDULABLE_SUFFIX,
                    planned_date=None,
                    scheduled_duration=remaining,
                    **base,
                )
            )
            break

        current = today + timedelta(days=day_offset)
        free = ledger.free_hours(current)
        if free <= EPSILON:
            day_offset += 1
            continue

        portion = min(remaining, free)
        if remaining > portion + EPSILON or part_index > 1:
            description = task.description + SPLIT_SUFFIX.format(index=part_index)
        else:
            description = task.description

        item = ScheduleItem(
            schedule_id=next_id(task.id),
            description=description,
            planned_date=current,
            scheduled_duration=portion,
            **base,
        )
        ledger.record(item)
        items.append(item)

        remaining -= portion
        part_index += 1
        if remaining > EPSILON and free - portion <= EPSILON:
            day_offset += 1

    return items
