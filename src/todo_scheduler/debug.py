"""ASCII visualisation for development-time verification.

This module is dev-only and not imported by the engine.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from itertools import groupby
from typing import Iterable

from todo_scheduler.calendar import WeeklyAvailability
from todo_scheduler.types import ScheduleItem

DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


def format_hours_minutes(hours: float) -> str:
    """Render decimal hours as '1h 30min', '2h', '45min' or '0min'."""
    total_minutes = round(max(0.0, hours) * 60)
    if total_minutes == 0:
        return "0min"
    h, m = divmod(total_minutes, 60)
    if h and m:
        return f"{h}h {m}min"
    if h:
        return f"{h}h"
    return f"{m}min"


def _day_label(d: date) -> str:
    return f"{DAY_NAMES[d.weekday()]} {d.strftime('%d %b')}"


def show_capacity(
    availability: WeeklyAvailability,
    start: date,
    end: date,
    now: datetime | None = None,
) -> str:
    """Print one row per day with its slots and available hours.

    Args:
        availability: WeeklyAvailability instance
        start: First date to show (inclusive)
        end: Last date to show (exclusive)
        now: When given, today's row reflects elapsed time

    Returns the string and also prints to stdout.
    """
    lines: list[str] = []
    current = start
    while current < end:
        slots = availability.slots_for_date(current)
        slot_text = ", ".join(
            f"{s.start:%H:%M}-{s.end:%H:%M}" for s in slots
        ) or "-"
        hours = availability.available_hours(current, now)
        lines.append(
            f"{_day_label(current):>10s}  {format_hours_minutes(hours):>10s}  {slot_text}"
        )
        current += timedelta(days=1)

    result = "\n".join(lines)
    print(result)
    return result


def show_schedule(items: Iterable[ScheduleItem]) -> str:
    """Print the schedule grouped by planned date, unschedulable items last.

    Each row: duration, type, description. Pinned items are marked with '*'.
    Returns the string and also prints to stdout.
    """
    items = list(items)
    dated = sorted(
        (i for i in items if i.planned_date is not None),
        key=lambda i: i.planned_date,  # type: ignore[arg-type, return-value]
    )
    lines: list[str] = []

    for day, group in groupby(dated, key=lambda i: i.planned_date):
        group = list(group)
        total = sum(i.scheduled_duration for i in group)
        lines.append(f"{_day_label(day)}  ({format_hours_minutes(total)})")  # type: ignore[arg-type]
        for item in group:
            pin = "*" if item.is_manually_scheduled else " "
            lines.append(
                f"  {pin} {format_hours_minutes(item.scheduled_duration):>10s}  "
                f"{item.type.value:<16s}  {item.description}"
            )

    unscheduled = [i for i in items if i.is_unschedulable]
    if unscheduled:
        lines.append("Unschedulable")
        for item in unscheduled:
            lines.append(
                f"    {format_hours_minutes(item.scheduled_duration):>10s}  "
                f"{item.type.value:<16s}  {item.description}"
            )

    result = "\n".join(lines)
    print(result)
    return result
