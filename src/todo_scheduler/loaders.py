"""Data loading utilities for settings, task records and snapshots."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from todo_scheduler.calendar import parse_time
from todo_scheduler.durations import to_hours
from todo_scheduler.planner import ScheduleSnapshot
from todo_scheduler.resolution import reject_aware
from todo_scheduler.schema import (
    TYPE_ALIASES,
    parse_hhmm,
    parse_optional_date,
    parse_timestamp,
    slot_bounds,
    validate_filters,
    validate_task_record,
    validate_time_slots,
    weekday_index,
)
from todo_scheduler.types import (
    BenefitDuration,
    Deadline,
    Filters,
    FixedAppointment,
    Settings,
    Task,
    TaskType,
    TimeSlot,
)

logger = logging.getLogger(__name__)

DEFAULT_SLOT = ("09:00", "17:00")


def _raise_errors(errors: list[str], source: str) -> None:
    if errors:
        raise ValueError(
            f"Validation errors in {source}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _hhmm_or_none(value: object) -> str | None:
    if value in (None, ""):
        return None
    return f"{parse_hhmm(value):%H:%M}"


def default_settings() -> Settings:
    """Every weekday 09:00-17:00, benefit ranking and auto priority on."""
    start, end = parse_time(DEFAULT_SLOT[0]), parse_time(DEFAULT_SLOT[1])
    return Settings(
        time_slots={
            day: (TimeSlot(id=f"ts-{day}-0", start=start, end=end),)
            for day in range(7)
        },
        calc_priority=True,
        auto_priority=True,
    )


def settings_from_dict(data: dict, source: str = "settings") -> Settings:
    """Build Settings from the stored format.

    {
        "dailyTimeSlots": { "monday": [{"id": "...", "start": "09:00", "end": "17:00"}], ... },
        "calcPriority": true,
        "autoPriority": true
    }

    Weekday keys may also be "0".."6"; slots may be ["09:00", "17:00"] pairs.
    Raises ValueError if validation fails.
    """
    raw_slots = data.get("dailyTimeSlots", {})
    _raise_errors(validate_time_slots(raw_slots), source)

    time_slots: dict[int, tuple[TimeSlot, ...]] = {}
    for day_key, slots in raw_slots.items():
        weekday = weekday_index(day_key)
        parsed = []
        for i, slot in enumerate(slots):
            start, end = slot_bounds(slot)  # type: ignore[misc]
            slot_id = slot.get("id") if isinstance(slot, dict) else None
            parsed.append(
                TimeSlot(
                    id=slot_id or f"ts-{weekday}-{i}",
                    start=parse_time(start),
                    end=parse_time(end),
                )
            )
        time_slots[weekday] = time_slots.get(weekday, ()) + tuple(parsed)  # type: ignore[index]

    return Settings(
        time_slots=time_slots,
        calc_priority=bool(data.get("calcPriority", True)),
        auto_priority=bool(data.get("autoPriority", True)),
    )


def filters_from_dict(data: dict | None) -> Filters:
    """Build Filters; a missing record means no filters."""
    if not data:
        return Filters()
    _raise_errors(validate_filters(data), "filters")
    return Filters(
        prioritized_locations=frozenset(data.get("prioritizedLocations", [])),
        prioritized_user_ids=frozenset(data.get("prioritizedUserIds", [])),
    )


def task_from_record(record: dict) -> Task:
    """Build a Task from a stored (camelCase) record.

    Only the fields of the record's own type are read. Durations and
    benefits are coerced with to_hours. A manual pin needs both
    isManuallyScheduled and manualDate. Raises ValueError if validation fails.
    """
    _raise_errors(validate_task_record(record), f"task {record.get('id', '<no id>')}")

    task_type = TaskType(TYPE_ALIASES[record["type"]])
    if task_type is TaskType.BENEFIT_DURATION:
        benefit = record.get("financialBenefit")
        payload = BenefitDuration(
            estimated_duration=to_hours(record.get("estimatedDuration")),
            financial_benefit=None if benefit in (None, "") else to_hours(benefit),
        )
    elif task_type is TaskType.DEADLINE:
        payload = Deadline(
            deadline_date=parse_optional_date(record.get("deadlineDate")),
            deadline_duration=to_hours(record.get("deadlineDuration")),
        )
    else:
        payload = FixedAppointment(
            fixed_date=parse_optional_date(record.get("fixedDate")),
            fixed_duration=to_hours(record.get("fixedDuration")),
            fixed_time=_hhmm_or_none(record.get("fixedTime")),
        )

    manual_date = None
    if record.get("isManuallyScheduled"):
        manual_date = parse_optional_date(record.get("manualDate"))
        if manual_date is None:
            logger.debug("Task %r flagged as pinned without a date", record["id"])

    owner_id = record.get("ownerId")
    assigned_to = frozenset(record.get("assignedTo") or ([owner_id] if owner_id else []))
    completed_at = record.get("completedAt")

    return Task(
        id=str(record["id"]),
        description=record["description"],
        payload=payload,
        completed=bool(record.get("completed", False)),
        completed_at=parse_timestamp(completed_at) if completed_at else None,
        owner_id=owner_id,
        assigned_to=assigned_to,
        notes=record.get("notes") or None,
        location=record.get("location") or None,
        manual_date=manual_date,
    )


def load_settings_json(path: str | Path) -> Settings:
    """Load Settings from a JSON file. Raises ValueError if validation fails."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return settings_from_dict(data.get("settings", data), source=path.name)


def load_snapshot_json(
    path: str | Path,
    now: datetime | None = None,
    current_user_id: str | None = None,
) -> ScheduleSnapshot:
    """Load a complete engine input from a JSON file.

    {
        "now": "2025-01-06T09:00:00",        (optional)
        "currentUserId": "u1",               (optional)
        "settings": { ... },                 (optional, defaults apply)
        "filters": { ... },                  (optional)
        "tasks": [ { ... }, ... ]
    }

    Arguments override the file's now/currentUserId; without either, now
    is the current local time.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if "settings" in data:
        settings = settings_from_dict(data["settings"], source=path.name)
    else:
        settings = default_settings()

    if now is None:
        now = datetime.fromisoformat(data["now"]) if data.get("now") else datetime.now()
    reject_aware(now, "now")

    tasks = tuple(task_from_record(r) for r in data.get("tasks", []))
    logger.info("Loaded %d tasks from %s", len(tasks), path.name)

    return ScheduleSnapshot(
        tasks=tasks,
        settings=settings,
        now=now,
        filters=filters_from_dict(data.get("filters")),
        current_user_id=current_user_id or data.get("currentUserId"),
    )
