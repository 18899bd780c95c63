"""Schedule orchestrator: full recompute from an immutable snapshot.

Composes the primitives in a fixed order:

    partition (prioritized, other)
    for each subset:
        resolve fixed dates -> order -> place_fixed
        priority_sort flexible tasks (auto priority) -> allocate_flexible

Both subsets book into one DayLedger, so the prioritized subset gets first
claim on every day's capacity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Sequence

from todo_scheduler.calendar import WeeklyAvailability
from todo_scheduler.edits import clear_manual_pins
from todo_scheduler.occupancy import DayLedger, allocate_flexible, place_fixed
from todo_scheduler.priority import fixed_task_order, priority_sort
from todo_scheduler.resolution import reject_aware, resolve_fixed_tasks
from todo_scheduler.types import (
    Filters,
    ScheduleIdAllocator,
    ScheduleItem,
    SequentialIds,
    Settings,
    Task,
    TaskType,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleSnapshot:
    """Everything one recompute reads. Supplied by the caller, never mutated."""

    tasks: tuple[Task, ...]
    settings: Settings
    now: datetime
    filters: Filters = field(default_factory=Filters)
    current_user_id: str | None = None


def partition_tasks(
    tasks: Iterable[Task],
    filters: Filters,
    current_user_id: str | None,
) -> tuple[list[Task], list[Task]]:
    """Split tasks into (prioritized, other).

    A task is prioritized when its location is one of the prioritized
    locations, or when every prioritized user plus the current user is
    assigned to it. Without active filters or a known user, every task is
    "other".
    """
    tasks = list(tasks)
    if not filters.is_active or not current_user_id:
        return [], tasks

    required_users = set(filters.prioritized_user_ids) | {current_user_id}
    prioritized: list[Task] = []
    other: list[Task] = []
    for task in tasks:
        matches_location = (
            bool(filters.prioritized_locations)
            and task.location in filters.prioritized_locations
        )
        matches_users = (
            bool(filters.prioritized_user_ids)
            and required_users <= task.assigned_to
        )
        if matches_location or matches_users:
            prioritized.append(task)
        else:
            other.append(task)
    return prioritized, other


def _is_fixed(task: Task) -> bool:
    return task.type is not TaskType.BENEFIT_DURATION or task.is_manually_scheduled


def plan_task_set(
    tasks: Sequence[Task],
    settings: Settings,
    ledger: DayLedger,
    today: date,
    next_id: ScheduleIdAllocator,
) -> list[ScheduleItem]:
    """Place one subset: fixed tasks first, then flexible tasks in priority order."""
    fixed = [t for t in tasks if _is_fixed(t)]
    flexible = [t for t in tasks if not _is_fixed(t)]

    items: list[ScheduleItem] = []
    for resolved in fixed_task_order(resolve_fixed_tasks(fixed, today)):
        items.append(place_fixed(resolved, ledger, next_id))

    if settings.auto_priority:
        flexible = priority_sort(flexible, calc_priority=settings.calc_priority)
    for task in flexible:
        items.extend(allocate_flexible(task, ledger, today, next_id))

    return items


def recalculate_schedule(
    snapshot: ScheduleSnapshot,
    next_id: ScheduleIdAllocator | None = None,
) -> list[ScheduleItem]:
    """Rebuild the whole schedule from `snapshot`.

    Always runs in full and never raises for data problems: tasks without
    a usable date are skipped, tasks that do not fit within the horizon come
    back as an item with no planned date.

    Raises:
        TypeError: If snapshot.now is timezone-aware.
    """
    reject_aware(snapshot.now, "now")
    if next_id is None:
        next_id = SequentialIds()

    settings = snapshot.settings
    today = snapshot.now.date()

    tasks: Sequence[Task] = snapshot.tasks
    if settings.auto_priority:
        tasks = clear_manual_pins(tasks)
    active = [t for t in tasks if not t.completed]

    prioritized, other = partition_tasks(
        active, snapshot.filters, snapshot.current_user_id
    )
    logger.debug(
        "Recalculating schedule for %s: %d active tasks (%d prioritized)",
        today.isoformat(), len(active), len(prioritized),
    )

    ledger = DayLedger(WeeklyAvailability.from_settings(settings), snapshot.now)
    schedule: list[ScheduleItem] = []
    schedule.extend(plan_task_set(prioritized, settings, ledger, today, next_id))
    schedule.extend(plan_task_set(other, settings, ledger, today, next_id))

    unschedulable = sum(1 for item in schedule if item.is_unschedulable)
    logger.debug(
        "Schedule rebuilt: %d items, %d unschedulable",
        len(schedule), unschedulable,
    )
    return schedule
