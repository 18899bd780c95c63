"""todo-scheduler: Greedy day-by-day allocation of tasks into weekly availability."""

from todo_scheduler.calendar import WeeklyAvailability
from todo_scheduler.durations import (
    EPSILON,
    HORIZON_DAYS,
    benefit_per_hour,
    required_duration,
)
from todo_scheduler.edits import (
    clear_manual_pins,
    move_task,
    set_completed,
    update_task_details,
)
from todo_scheduler.occupancy import DayLedger, allocate_flexible, place_fixed
from todo_scheduler.planner import (
    ScheduleSnapshot,
    partition_tasks,
    plan_task_set,
    recalculate_schedule,
)
from todo_scheduler.priority import compare_tasks, fixed_task_order, priority_sort
from todo_scheduler.resolution import (
    ResolvedTask,
    resolve_fixed_tasks,
    resolve_target_date,
)
from todo_scheduler.types import (
    BenefitDuration,
    Deadline,
    Filters,
    FixedAppointment,
    ScheduleItem,
    SequentialIds,
    Settings,
    Task,
    TaskType,
    TimeSlot,
    uuid_ids,
)

__all__ = [
    "BenefitDuration",
    "DayLedger",
    "Deadline",
    "EPSILON",
    "Filters",
    "FixedAppointment",
    "HORIZON_DAYS",
    "ResolvedTask",
    "ScheduleItem",
    "ScheduleSnapshot",
    "SequentialIds",
    "Settings",
    "Task",
    "TaskType",
    "TimeSlot",
    "WeeklyAvailability",
    "allocate_flexible",
    "benefit_per_hour",
    "clear_manual_pins",
    "compare_tasks",
    "fixed_task_order",
    "move_task",
    "partition_tasks",
    "place_fixed",
    "plan_task_set",
    "priority_sort",
    "recalculate_schedule",
    "required_duration",
    "resolve_fixed_tasks",
    "resolve_target_date",
    "set_completed",
    "update_task_details",
    "uuid_ids",
]
