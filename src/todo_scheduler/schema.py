"""Input validation for availability slots, task records and filters."""

from __future__ import annotations

from datetime import date, datetime, time

WEEKDAY_NAMES = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)

# Day keys written by the first app version.
GERMAN_WEEKDAY_NAMES = (
    "montag", "dienstag", "mittwoch", "donnerstag", "freitag", "samstag", "sonntag",
)

# Stored type labels -> canonical TaskType values. Older records use the
# German labels of the first app version.
TYPE_ALIASES = {
    "BenefitDuration": "BenefitDuration",
    "Deadline": "Deadline",
    "FixedAppointment": "FixedAppointment",
    "Vorteil & Dauer": "BenefitDuration",
    "Fixer Termin": "FixedAppointment",
}

_DATE_FIELDS = ("deadlineDate", "fixedDate", "manualDate")


def weekday_index(key: object) -> int | None:
    """Map a weekday key ("0".."6", 0..6, an English or German name) to Monday=0."""
    if isinstance(key, int) and not isinstance(key, bool):
        return key if 0 <= key <= 6 else None
    if isinstance(key, str):
        name = key.strip().lower()
        for names in (WEEKDAY_NAMES, GERMAN_WEEKDAY_NAMES):
            if name in names:
                return names.index(name)
        if name.isdigit() and 0 <= int(name) <= 6:
            return int(name)
    return None


def slot_bounds(slot: object) -> tuple[object, object] | None:
    """Extract (start, end) from {"start","end"} dicts or [start, end] pairs."""
    if isinstance(slot, dict):
        return slot.get("start"), slot.get("end")
    if isinstance(slot, (list, tuple)) and len(slot) == 2:
        return slot[0], slot[1]
    return None


def parse_hhmm(value: object) -> time:
    if not isinstance(value, str) or len(value.split(":")) != 2:
        raise ValueError(f"expected HH:MM, got {value!r}")
    return time.fromisoformat(value if len(value) == 5 else value.zfill(5))


def parse_optional_date(value: object) -> date | None:
    """ISO date string, date or datetime -> date. Empty values give None.

    Raises ValueError for anything else.
    """
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"expected an ISO date, got {value!r}")
    return date.fromisoformat(value)


def parse_timestamp(value: object) -> datetime:
    """Parse an ISO timestamp to naive local time.

    Accepts the "...Z" suffix that JavaScript's toISOString() writes.
    Offsets are converted to the local timezone and then dropped.
    """
    if not isinstance(value, str):
        raise ValueError(f"expected an ISO timestamp, got {value!r}")
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def validate_time_slots(time_slots: dict) -> list[str]:
    """Validate weekly availability. Returns list of error messages (empty = valid).

    Checks:
    - Weekday keys are 0-6 or English weekday names
    - Each slot has HH:MM start and end with start < end
    - Slots within a day do not overlap
    """
    errors: list[str] = []
    if not isinstance(time_slots, dict):
        return [f"Time slots must be a mapping of weekday to slots, got {type(time_slots).__name__}"]

    for day_key, slots in time_slots.items():
        weekday = weekday_index(day_key)
        if weekday is None:
            errors.append(f"Invalid weekday key: {day_key!r} (must be 0-6 or a weekday name)")
            continue
        if not isinstance(slots, list):
            errors.append(f"Weekday {day_key}: slots must be a list")
            continue

        parsed: list[tuple[time, time]] = []
        for i, slot in enumerate(slots):
            bounds = slot_bounds(slot)
            if bounds is None:
                errors.append(
                    f"Weekday {day_key}, slot {i}: "
                    f"expected {{start, end}} or [start, end], got {slot!r}"
                )
                continue
            try:
                start = parse_hhmm(bounds[0])
                end = parse_hhmm(bounds[1])
            except (ValueError, TypeError) as e:
                errors.append(f"Weekday {day_key}, slot {i}: invalid time - {e}")
                continue
            if start >= end:
                errors.append(
                    f"Weekday {day_key}, slot {i}: start {bounds[0]} "
                    f"must be before end {bounds[1]}"
                )
                continue
            parsed.append((start, end))

        parsed.sort()
        for j in range(1, len(parsed)):
            if parsed[j][0] < parsed[j - 1][1]:
                errors.append(
                    f"Weekday {day_key}: overlapping slots "
                    f"{parsed[j-1][0]:%H:%M}-{parsed[j-1][1]:%H:%M} and "
                    f"{parsed[j][0]:%H:%M}-{parsed[j][1]:%H:%M}"
                )

    return errors


def validate_task_record(record: dict) -> list[str]:
    """Validate one stored task record. Returns list of error messages.

    Checks:
    - id and description are present
    - type is a known task type
    - date fields parse as ISO dates when present
    - fixedTime is HH:MM when present
    - assignedTo is a list of user ids when present

    Missing date fields and non-numeric durations are not errors: the
    engine skips or zeroes them.
    """
    if not isinstance(record, dict):
        return [f"Task record must be an object, got {type(record).__name__}"]

    label = record.get("id", "<no id>")
    errors: list[str] = []

    if not record.get("id"):
        errors.append("Task without id")
    if not isinstance(record.get("description"), str):
        errors.append(f"Task {label}: missing description")
    if record.get("type") not in TYPE_ALIASES:
        errors.append(f"Task {label}: unknown type {record.get('type')!r}")

    for field in _DATE_FIELDS:
        value = record.get(field)
        if value in (None, ""):
            continue
        try:
            date.fromisoformat(value)
        except (ValueError, TypeError):
            errors.append(f"Task {label}: invalid {field} {value!r}")

    completed_at = record.get("completedAt")
    if completed_at not in (None, ""):
        try:
            parse_timestamp(completed_at)
        except (ValueError, TypeError):
            errors.append(f"Task {label}: invalid completedAt {completed_at!r}")

    fixed_time = record.get("fixedTime")
    if fixed_time not in (None, ""):
        try:
            parse_hhmm(fixed_time)
        except (ValueError, TypeError):
            errors.append(f"Task {label}: invalid fixedTime {fixed_time!r}")

    assigned = record.get("assignedTo")
    if assigned is not None and (
        not isinstance(assigned, list)
        or not all(isinstance(uid, str) for uid in assigned)
    ):
        errors.append(f"Task {label}: assignedTo must be a list of user ids")

    return errors


def validate_filters(filters: dict) -> list[str]:
    """Validate a filters record: both keys optional lists of strings."""
    errors: list[str] = []
    for field in ("prioritizedLocations", "prioritizedUserIds"):
        value = filters.get(field, [])
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            errors.append(f"Filters: {field} must be a list of strings")
    return errors
