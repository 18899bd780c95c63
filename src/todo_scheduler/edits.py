"""Task editing operations that produce the next input snapshot.

All functions are pure: tasks are frozen, so every edit returns new objects.
Any edit of a task's content drops its manual pin; the schedule must be
recomputed afterwards.
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Sequence

from todo_scheduler.durations import to_hours
from todo_scheduler.schema import TYPE_ALIASES, parse_hhmm, parse_optional_date
from todo_scheduler.types import PAYLOAD_TYPES, Task, TaskType

# Keys accepted by update_task_details besides the payload fields.
_TASK_KEYS = ("description", "owner_id", "assigned_to", "notes", "location")


def _payload_fields(payload_type: type) -> set[str]:
    return {f.name for f in dataclasses.fields(payload_type)}


_ALL_PAYLOAD_KEYS = set().union(*(_payload_fields(p) for p in PAYLOAD_TYPES.values()))

_DATE_KEYS = ("deadline_date", "fixed_date")
_HOURS_KEYS = ("estimated_duration", "deadline_duration", "fixed_duration")


def _coerce_payload_value(key: str, value: Any) -> Any:
    """Normalise a form value for a payload field.

    Raises ValueError when a date or time cannot be parsed.
    """
    if key in _HOURS_KEYS:
        return to_hours(value)
    if key == "financial_benefit":
        return None if value in (None, "") else to_hours(value)
    try:
        if key in _DATE_KEYS:
            return parse_optional_date(value)
        if key == "fixed_time":
            return None if value in (None, "") else f"{parse_hhmm(value):%H:%M}"
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid {key} {value!r}: {e}") from None
    return value


def clear_manual_pins(tasks: Iterable[Task]) -> list[Task]:
    """Drop every manual pin (auto priority switched on)."""
    return [
        dataclasses.replace(t, manual_date=None) if t.is_manually_scheduled else t
        for t in tasks
    ]


def update_task_details(task: Task, changes: Mapping[str, Any]) -> Task:
    """Apply an edit to a task.

    `changes` may hold any of description, owner_id, assigned_to, notes,
    location, type, and the payload fields of the (new) type. Switching
    `type` starts from an empty payload of the new type, so the previous
    type's fields are gone. Payload fields belonging to another type are
    ignored. Empty notes/location are stored as None. Dates may be ISO
    strings and durations numeric strings, as sent by an edit form.

    Raises:
        ValueError: On unknown keys, an unknown type, or an unparsable
            date or time.
    """
    unknown = set(changes) - set(_TASK_KEYS) - _ALL_PAYLOAD_KEYS - {"type"}
    if unknown:
        raise ValueError(f"Unknown task fields: {', '.join(sorted(unknown))}")

    payload = task.payload
    if "type" in changes:
        label = changes["type"]
        if isinstance(label, TaskType):
            new_type = label
        elif label in TYPE_ALIASES:
            new_type = TaskType(TYPE_ALIASES[label])
        else:
            raise ValueError(f"Unknown task type {label!r}")
        if new_type is not task.type:
            payload = PAYLOAD_TYPES[new_type]()

    allowed = _payload_fields(type(payload))
    payload_changes = {
        k: _coerce_payload_value(k, v) for k, v in changes.items() if k in allowed
    }
    if payload_changes:
        payload = dataclasses.replace(payload, **payload_changes)

    updates: dict[str, Any] = {"payload": payload, "manual_date": None}
    if "description" in changes:
        updates["description"] = changes["description"]
    if "owner_id" in changes:
        updates["owner_id"] = changes["owner_id"]
    if "assigned_to" in changes:
        updates["assigned_to"] = frozenset(changes["assigned_to"])
    if "notes" in changes:
        updates["notes"] = changes["notes"] or None
    if "location" in changes:
        updates["location"] = changes["location"] or None

    return dataclasses.replace(task, **updates)


def set_completed(task: Task, completed: bool, now: datetime) -> Task:
    """Mark a task done (stamping completed_at) or reopen it."""
    return dataclasses.replace(
        task,
        completed=completed,
        completed_at=now if completed else None,
        manual_date=None,
    )


def move_task(
    tasks: Sequence[Task],
    dragged_id: str,
    drop_target_id: str | None,
    insert_before: bool,
    new_date: date | str | None = None,
) -> list[Task]:
    """Apply a drag-and-drop: reorder, and pin to `new_date` when given.

    The dragged task lands before or after the drop target; with no (or an
    unknown) target it goes to the end. Unknown dragged ids leave the list
    unchanged. The new order only matters while auto priority is off.
    """
    result = list(tasks)
    index = next((i for i, t in enumerate(result) if t.id == dragged_id), None)
    if index is None:
        return result

    dragged = result.pop(index)
    if new_date is not None:
        dragged = dataclasses.replace(dragged, manual_date=parse_optional_date(new_date))

    drop_index = next(
        (i for i, t in enumerate(result) if t.id == drop_target_id), None
    )
    if drop_index is None:
        result.append(dragged)
    elif insert_before:
        result.insert(drop_index, dragged)
    else:
        result.insert(drop_index + 1, dragged)
    return result
