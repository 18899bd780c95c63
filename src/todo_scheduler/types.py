"""Shared types: task payload variants, Task, Settings, Filters, ScheduleItem."""

from __future__ import annotations

import itertools
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Callable, ClassVar, Union


class TaskType(str, Enum):
    """The three task kinds. Values match the stored record format."""

    BENEFIT_DURATION = "BenefitDuration"
    DEADLINE = "Deadline"
    FIXED_APPOINTMENT = "FixedAppointment"


@dataclass(frozen=True)
class BenefitDuration:
    """Flexible work: a duration estimate plus an optional money value."""

    type: ClassVar[TaskType] = TaskType.BENEFIT_DURATION

    estimated_duration: float = 0.0
    financial_benefit: float | None = None


@dataclass(frozen=True)
class Deadline:
    """Work that must be done before `deadline_date`."""

    type: ClassVar[TaskType] = TaskType.DEADLINE

    deadline_date: date | None = None
    deadline_duration: float = 0.0


@dataclass(frozen=True)
class FixedAppointment:
    """Work bound to one calendar date, optionally at an HH:MM time."""

    type: ClassVar[TaskType] = TaskType.FIXED_APPOINTMENT

    fixed_date: date | None = None
    fixed_duration: float = 0.0
    fixed_time: str | None = None


TaskPayload = Union[BenefitDuration, Deadline, FixedAppointment]

PAYLOAD_TYPES: dict[TaskType, type] = {
    TaskType.BENEFIT_DURATION: BenefitDuration,
    TaskType.DEADLINE: Deadline,
    TaskType.FIXED_APPOINTMENT: FixedAppointment,
}


@dataclass(frozen=True)
class Task:
    """Persisted task definition, read by the engine as an immutable snapshot.

    Invariants:
        - Exactly one payload, so only the fields of `type` exist
        - A task is manually scheduled iff `manual_date` is set
    """

    id: str
    description: str
    payload: TaskPayload
    completed: bool = False
    completed_at: datetime | None = None
    owner_id: str | None = None
    assigned_to: frozenset[str] = frozenset()
    notes: str | None = None
    location: str | None = None
    manual_date: date | None = None

    @property
    def type(self) -> TaskType:
        return self.payload.type

    @property
    def is_manually_scheduled(self) -> bool:
        return self.manual_date is not None


@dataclass(frozen=True)
class TimeSlot:
    """One availability window within a weekday. Half-open [start, end)."""

    id: str
    start: time
    end: time

    @property
    def minutes(self) -> int:
        span = (self.end.hour * 60 + self.end.minute) - (
            self.start.hour * 60 + self.start.minute
        )
        return max(span, 0)


@dataclass(frozen=True)
class Settings:
    """Weekly availability plus the two priority switches.

    `time_slots` is keyed by weekday, Monday=0 through Sunday=6.
    """

    time_slots: dict[int, tuple[TimeSlot, ...]] = field(default_factory=dict)
    calc_priority: bool = True
    auto_priority: bool = True


@dataclass(frozen=True)
class Filters:
    """Locations and collaborators whose tasks get first claim on capacity."""

    prioritized_locations: frozenset[str] = frozenset()
    prioritized_user_ids: frozenset[str] = frozenset()

    @property
    def is_active(self) -> bool:
        return bool(self.prioritized_locations or self.prioritized_user_ids)


@dataclass(frozen=True)
class ScheduleItem:
    """One placed fragment of a task. Derived, never persisted.

    `planned_date` is None only for the unschedulable remainder of a task
    that did not fit within the horizon.
    """

    task_id: str
    schedule_id: str
    description: str
    type: TaskType
    planned_date: date | None
    scheduled_duration: float
    financial_benefit: float | None = None
    estimated_duration: float | None = None
    fixed_time: str | None = None
    deadline_date: date | None = None
    fixed_date: date | None = None
    assigned_to: frozenset[str] = frozenset()
    notes: str | None = None
    location: str | None = None
    is_manually_scheduled: bool = False

    @property
    def is_unschedulable(self) -> bool:
        return self.planned_date is None


ScheduleIdAllocator = Callable[[str], str]


class SequentialIds:
    """Monotonic schedule-id allocator: sched-<task id>-<n>."""

    def __init__(self, prefix: str = "sched") -> None:
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self, task_id: str) -> str:
        return f"{self.prefix}-{task_id}-{next(self._counter)}"


def uuid_ids(task_id: str) -> str:
    """Random schedule-id allocator for callers that merge several runs."""
    return f"sched-{task_id}-{uuid.uuid4().hex}"
