#!/usr/bin/env python
"""Visual verification report for todo-scheduler.

Run:  uv run python scripts/verify.py [snapshot.json] [--now ISO] [--user ID]

Produces a formatted report showing:
  1. Settings (weekly time slots, priority switches, filters)
  2. Capacity for the next days, adjusted for the current time
  3. Task definitions in the snapshot
  4. The computed schedule  -- table + per-day ASCII view
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
FIXTURES = ROOT / "data" / "fixtures"

sys.path.insert(0, str(ROOT / "src"))

from todo_scheduler.calendar import WeeklyAvailability
from todo_scheduler.debug import DAY_NAMES, format_hours_minutes, show_capacity, show_schedule
from todo_scheduler.durations import required_duration
from todo_scheduler.loaders import load_snapshot_json
from todo_scheduler.planner import ScheduleSnapshot, recalculate_schedule

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------
WIDTH = 90


def banner(title: str):
    print()
    print("=" * WIDTH)
    print(f"  {title}")
    print("=" * WIDTH)


def heading(title: str):
    print()
    print(f"  {title}")
    print(f"  {'-' * (len(title) + 2)}")


def table(headers: list[str], rows: list[list[str]], indent: int = 4):
    """Print a formatted table with auto-sized columns."""
    col_widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            col_widths[i] = max(col_widths[i], len(cell))

    pad = " " * indent
    fmt = pad + "  ".join(f"{{:<{w}}}" for w in col_widths)
    sep = pad + "  ".join("-" * w for w in col_widths)

    print(fmt.format(*headers))
    print(sep)
    for row in rows:
        padded = row + [""] * (len(headers) - len(row))
        print(fmt.format(*padded))


# ---------------------------------------------------------------------------
# Section 1: Settings
# ---------------------------------------------------------------------------
def section_settings(snapshot: ScheduleSnapshot):
    banner("SETTINGS")
    settings = snapshot.settings

    heading("Weekly Time Slots")
    rows = []
    for wd in range(7):
        slots = settings.time_slots.get(wd, ())
        slot_str = ", ".join(f"{s.start:%H:%M}-{s.end:%H:%M}" for s in slots) or "(none)"
        rows.append([DAY_NAMES[wd], slot_str])
    table(["Day", "Slots"], rows)

    heading("Switches")
    print(f"    calc_priority:  {settings.calc_priority}")
    print(f"    auto_priority:  {settings.auto_priority}")

    heading("Filters")
    filters = snapshot.filters
    print(f"    locations:      {', '.join(sorted(filters.prioritized_locations)) or '(none)'}")
    print(f"    users:          {', '.join(sorted(filters.prioritized_user_ids)) or '(none)'}")
    print(f"    current user:   {snapshot.current_user_id or '(unknown)'}")


# ---------------------------------------------------------------------------
# Section 2: Capacity
# ---------------------------------------------------------------------------
def section_capacity(snapshot: ScheduleSnapshot, days: int):
    banner("CAPACITY")
    availability = WeeklyAvailability.from_settings(snapshot.settings)
    today = snapshot.now.date()
    print(f"\n    Now:            {snapshot.now.strftime('%A %Y-%m-%d %H:%M')}")
    print(f"    Weekly hours:   {format_hours_minutes(availability.weekly_hours())}\n")
    show_capacity(availability, today, today + timedelta(days=days), snapshot.now)


# ---------------------------------------------------------------------------
# Section 3: Tasks
# ---------------------------------------------------------------------------
def section_tasks(snapshot: ScheduleSnapshot):
    banner("TASKS")
    rows = []
    for task in snapshot.tasks:
        rows.append([
            task.id,
            task.type.value,
            format_hours_minutes(required_duration(task)),
            "yes" if task.completed else "",
            task.manual_date.isoformat() if task.manual_date else "",
            task.location or "",
            task.description,
        ])
    table(["Id", "Type", "Duration", "Done", "Pinned", "Location", "Description"], rows)


# ---------------------------------------------------------------------------
# Section 4: Schedule
# ---------------------------------------------------------------------------
def section_schedule(snapshot: ScheduleSnapshot):
    banner("SCHEDULE")
    items = recalculate_schedule(snapshot)

    heading("Items in allocation order")
    rows = []
    for item in items:
        rows.append([
            item.planned_date.isoformat() if item.planned_date else "-",
            format_hours_minutes(item.scheduled_duration),
            item.task_id,
            item.schedule_id,
            item.description,
        ])
    table(["Date", "Hours", "Task", "Schedule id", "Description"], rows)

    heading("By day")
    show_schedule(items)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None):
    ap = argparse.ArgumentParser(description="Print a schedule report for a task snapshot.")
    ap.add_argument(
        "snapshot",
        nargs="?",
        default=str(FIXTURES / "snapshot.json"),
        help="Snapshot JSON (default: data/fixtures/snapshot.json)",
    )
    ap.add_argument("--now", default=None, help="Override 'now' (ISO datetime, naive local time)")
    ap.add_argument("--user", default=None, help="Override the current user id")
    ap.add_argument("--days", type=int, default=7, help="Days of capacity to show (default: 7)")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log engine decisions")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    now = datetime.fromisoformat(args.now) if args.now else None
    try:
        snapshot = load_snapshot_json(args.snapshot, now=now, current_user_id=args.user)
    except (OSError, ValueError, TypeError) as e:
        raise SystemExit(f"Cannot load snapshot: {e}")

    banner("TODO-SCHEDULER   --  VISUAL VERIFICATION REPORT")
    print(f"    Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}")
    print(f"    Snapshot:  {args.snapshot}")

    section_settings(snapshot)
    section_capacity(snapshot, args.days)
    section_tasks(snapshot)
    section_schedule(snapshot)

    banner("END OF REPORT")
    print()


if __name__ == "__main__":
    main()
