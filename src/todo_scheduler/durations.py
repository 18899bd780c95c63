"""Duration and benefit accessors for task payloads."""

from __future__ import annotations

import math

from todo_scheduler.types import (
    BenefitDuration,
    Deadline,
    FixedAppointment,
    Task,
)

# Tolerance for "is any time left" comparisons, in hours (well below a minute).
EPSILON = 0.0001

# Days the allocator walks forward before a task is declared unschedulable.
HORIZON_DAYS = 365


def to_hours(value: object) -> float:
    """Coerce a stored duration/benefit to a non-negative float.

    None, booleans, non-numeric strings, NaN/inf and negatives become 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def required_duration(task: Task) -> float:
    """Hours the task needs in total, taken from its type-specific field."""
    payload = task.payload
    if isinstance(payload, BenefitDuration):
        return to_hours(payload.estimated_duration)
    if isinstance(payload, Deadline):
        return to_hours(payload.deadline_duration)
    if isinstance(payload, FixedAppointment):
        return to_hours(payload.fixed_duration)
    raise TypeError(f"Unknown task payload {type(payload).__name__!r}")


def benefit_per_hour(task: Task) -> float:
    """financial_benefit / estimated_duration for BenefitDuration tasks, else 0."""
    payload = task.payload
    if not isinstance(payload, BenefitDuration):
        return 0.0
    benefit = to_hours(payload.financial_benefit)
    duration = to_hours(payload.estimated_duration)
    if benefit > 0 and duration > 0:
        return benefit / duration
    return 0.0
