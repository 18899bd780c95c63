"""Capacity layer: WeeklyAvailability, hours available on a calendar date."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterable, Mapping

from todo_scheduler.types import Settings, TimeSlot


def parse_time(s: str) -> time:
    """Parse 'HH:MM' string to time object."""
    parts = s.split(":")
    return time(int(parts[0]), int(parts[1]))


def _minute_of_day(t: time | datetime) -> int:
    return t.hour * 60 + t.minute


class WeeklyAvailability:
    """Recurring weekly availability. Answers capacity queries per date.

    Slots are keyed by weekday (Monday=0). All datetimes are naive local time.
    Nothing is cached: capacity for today depends on the `now` passed in.
    """

    def __init__(self, time_slots: Mapping[int, Iterable[TimeSlot]]) -> None:
        # weekday int -> slots sorted by start time
        self._slots: dict[int, list[TimeSlot]] = {}
        for day_key, slots in time_slots.items():
            self._slots[int(day_key)] = sorted(slots, key=lambda s: (s.start, s.end))

    @classmethod
    def from_settings(cls, settings: Settings) -> WeeklyAvailability:
        return cls(settings.time_slots)

    def slots_for_date(self, d: date) -> list[TimeSlot]:
        """Return the availability slots for a specific date, sorted by start."""
        return list(self._slots.get(d.weekday(), []))

    def available_minutes(self, d: date, now: datetime | None = None) -> int:
        """Count available minutes on `d`.

        When `d` is the current day of `now`, slots that already started
        only contribute the minutes remaining after `now`; slots that ended
        contribute nothing. Slots with end <= start are ignored.
        """
        is_today = now is not None and d == now.date()
        current = _minute_of_day(now) if is_today else 0

        total = 0
        for slot in self.slots_for_date(d):
            start = _minute_of_day(slot.start)
            end = _minute_of_day(slot.end)
            if is_today and current > start:
                start = current
            if end > start:
                total += end - start
        return total

    def available_hours(self, d: date, now: datetime | None = None) -> float:
        """Available hours on `d`, adjusted for elapsed time when `d` is today."""
        return self.available_minutes(d, now) / 60

    def weekly_hours(self) -> float:
        """Configured hours over one full week, ignoring the current time."""
        return sum(
            slot.minutes for slots in self._slots.values() for slot in slots
        ) / 60
