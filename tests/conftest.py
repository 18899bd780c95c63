"""Shared test fixtures and data loading for todo-scheduler.

All test data lives in data/fixtures/ as JSON files.  This module loads
that data and exposes helper functions + pytest fixtures for the tests.

Reference week: Mon 2025-01-06 through Sun 2025-01-12.
"""

from __future__ import annotations

import json
from datetime import date, datetime, time
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
FIXTURES_DIR = Path(__file__).resolve().parent.parent / "data" / "fixtures"
SCENARIOS_DIR = FIXTURES_DIR / "scenarios"


# ---------------------------------------------------------------------------
# Data loaders
# ---------------------------------------------------------------------------
def _load_json(path: Path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


_reference = _load_json(FIXTURES_DIR / "reference.json")
_settings = _load_json(FIXTURES_DIR / "settings.json")


# ---------------------------------------------------------------------------
# Reference constants derived from reference.json
# ---------------------------------------------------------------------------
EPOCH = datetime.fromisoformat(_reference["epoch"])

# Day lookup:  DAYS["mon"] → date(2025, 1, 6)
DAYS: dict[str, date] = {
    d["name"]: date.fromisoformat(d["date"]) for d in _reference["days"]
}


# ---------------------------------------------------------------------------
# Convenience helpers (importable by test modules)
# ---------------------------------------------------------------------------
def day_date(day: str) -> date:
    """Date object for a named day."""
    return DAYS[day]


def dt(day: str, time_label: str) -> datetime:
    """Datetime from day name and time label.

    >>> dt("mon", "09:00")
    datetime(2025, 1, 6, 9, 0)
    """
    return datetime.combine(DAYS[day], time.fromisoformat(time_label))


def load_scenarios(name: str):
    """Load a scenario file from data/fixtures/scenarios/{name}.json."""
    return _load_json(SCENARIOS_DIR / f"{name}.json")


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------
def make_settings(name: str = "standard", **overrides):
    """Build Settings from settings.json by name.

    Keyword overrides use the stored keys, e.g. autoPriority=False.
    """
    from todo_scheduler.loaders import settings_from_dict

    config = dict(_settings[name])
    config.update(overrides)
    return settings_from_dict(config, source=name)


def make_availability(name: str = "standard"):
    """Build a WeeklyAvailability from a named settings entry."""
    from todo_scheduler.calendar import WeeklyAvailability

    return WeeklyAvailability.from_settings(make_settings(name))


def flexible(task_id: str, hours, benefit=None, **fields):
    """BenefitDuration task."""
    from todo_scheduler.types import BenefitDuration, Task

    fields.setdefault("assigned_to", frozenset({"u1"}))
    return Task(
        id=task_id,
        description=fields.pop("description", task_id),
        payload=BenefitDuration(estimated_duration=hours, financial_benefit=benefit),
        **fields,
    )


def deadline(task_id: str, due: date | None, hours, **fields):
    """Deadline task."""
    from todo_scheduler.types import Deadline, Task

    fields.setdefault("assigned_to", frozenset({"u1"}))
    return Task(
        id=task_id,
        description=fields.pop("description", task_id),
        payload=Deadline(deadline_date=due, deadline_duration=hours),
        **fields,
    )


def appointment(task_id: str, on: date | None, hours, at: str | None = None, **fields):
    """FixedAppointment task."""
    from todo_scheduler.types import FixedAppointment, Task

    fields.setdefault("assigned_to", frozenset({"u1"}))
    return Task(
        id=task_id,
        description=fields.pop("description", task_id),
        payload=FixedAppointment(fixed_date=on, fixed_duration=hours, fixed_time=at),
        **fields,
    )


def snapshot(tasks, settings="standard", now=None, **kwargs):
    """ScheduleSnapshot with Monday 09:00 as the default 'now'."""
    from todo_scheduler.planner import ScheduleSnapshot

    if isinstance(settings, str):
        settings = make_settings(settings)
    return ScheduleSnapshot(
        tasks=tuple(tasks),
        settings=settings,
        now=now or dt("mon", "09:00"),
        **kwargs,
    )


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def monday_morning() -> datetime:
    return dt("mon", "09:00")


@pytest.fixture
def standard_settings():
    return make_settings("standard")


@pytest.fixture
def standard_availability():
    return make_availability("standard")


@pytest.fixture
def weekdays_availability():
    return make_availability("weekdays")


@pytest.fixture
def ledger(standard_availability, monday_morning):
    """Empty DayLedger over the standard week, now = Monday 09:00."""
    from todo_scheduler.occupancy import DayLedger

    return DayLedger(standard_availability, monday_morning)
