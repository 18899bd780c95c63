"""Tests for task edits: details, completion, drag-and-drop, pins."""

from __future__ import annotations

import pytest

from conftest import appointment, day_date, deadline, dt, flexible


class TestClearManualPins:

    def test_pins_removed(self):
        from todo_scheduler.edits import clear_manual_pins

        tasks = [flexible("a", 1, manual_date=day_date("wed")), flexible("b", 1)]
        cleared = clear_manual_pins(tasks)
        assert [t.is_manually_scheduled for t in cleared] == [False, False]
        assert cleared[1] is tasks[1]
        assert tasks[0].manual_date == day_date("wed")


class TestUpdateTaskDetails:

    def test_plain_fields(self):
        from todo_scheduler.edits import update_task_details

        task = flexible("a", 2, notes="old", location="home")
        updated = update_task_details(task, {
            "description": "New",
            "notes": "",
            "location": "",
            "assigned_to": ["u1", "u2"],
        })
        assert updated.description == "New"
        assert updated.notes is None
        assert updated.location is None
        assert updated.assigned_to == frozenset({"u1", "u2"})
        assert task.description == "a"

    def test_payload_field_of_current_type(self):
        from todo_scheduler.edits import update_task_details

        updated = update_task_details(flexible("a", 2), {"estimated_duration": 5, "financial_benefit": 100})
        assert updated.payload.estimated_duration == 5
        assert updated.payload.financial_benefit == 100

    def test_payload_field_of_other_type_ignored(self):
        from todo_scheduler.edits import update_task_details

        updated = update_task_details(flexible("a", 2), {"deadline_date": day_date("fri")})
        assert updated.payload == flexible("a", 2).payload

    def test_type_switch_clears_old_fields(self):
        from todo_scheduler.edits import update_task_details
        from todo_scheduler.types import Deadline, TaskType

        task = flexible("a", 2, benefit=500)
        updated = update_task_details(task, {
            "type": "Deadline",
            "deadline_date": day_date("fri"),
            "deadline_duration": 3,
            "estimated_duration": 9,
        })
        assert updated.type is TaskType.DEADLINE
        assert updated.payload == Deadline(deadline_date=day_date("fri"), deadline_duration=3)
        assert not hasattr(updated.payload, "financial_benefit")

    def test_same_type_keeps_payload(self):
        from todo_scheduler.edits import update_task_details

        task = appointment("a", day_date("tue"), 2, at="10:00")
        updated = update_task_details(task, {"type": "FixedAppointment", "fixed_time": "11:00"})
        assert updated.payload.fixed_date == day_date("tue")
        assert updated.payload.fixed_time == "11:00"

    def test_edit_drops_pin(self):
        from todo_scheduler.edits import update_task_details

        task = deadline("a", day_date("fri"), 1, manual_date=day_date("tue"))
        assert not update_task_details(task, {"notes": "x"}).is_manually_scheduled

    def test_unknown_field_rejected(self):
        from todo_scheduler.edits import update_task_details

        with pytest.raises(ValueError, match="Unknown task fields: colour"):
            update_task_details(flexible("a", 1), {"colour": "red"})

    def test_form_values_coerced(self):
        from conftest import snapshot
        from todo_scheduler.edits import update_task_details
        from todo_scheduler.planner import recalculate_schedule

        task = appointment("a", day_date("tue"), 1)
        updated = update_task_details(task, {"fixed_date": "2025-01-08", "fixed_duration": "2", "fixed_time": "9:30"})
        assert updated.payload.fixed_date == day_date("wed")
        assert updated.payload.fixed_duration == 2.0
        assert updated.payload.fixed_time == "09:30"

        items = recalculate_schedule(snapshot([updated]))
        assert [(i.planned_date, i.scheduled_duration) for i in items] == [(day_date("wed"), 2.0)]

    def test_form_values_for_other_types(self):
        from todo_scheduler.edits import update_task_details

        dl = update_task_details(deadline("a", day_date("fri"), 1), {"deadline_date": "", "deadline_duration": "n/a"})
        assert dl.payload.deadline_date is None
        assert dl.payload.deadline_duration == 0.0

        bd = update_task_details(flexible("b", 1, benefit=10), {"financial_benefit": "", "estimated_duration": "3.5"})
        assert bd.payload.financial_benefit is None
        assert bd.payload.estimated_duration == 3.5
        assert update_task_details(bd, {"financial_benefit": "120"}).payload.financial_benefit == 120.0

    @pytest.mark.parametrize(
        "task, changes, fragment",
        [
            (deadline("a", day_date("fri"), 1), {"deadline_date": "soon"}, "Invalid deadline_date"),
            (appointment("a", day_date("fri"), 1), {"fixed_date": 20250110}, "Invalid fixed_date"),
            (appointment("a", day_date("fri"), 1), {"fixed_time": "noon"}, "Invalid fixed_time"),
        ],
    )
    def test_unparsable_values_rejected(self, task, changes, fragment):
        from todo_scheduler.edits import update_task_details

        with pytest.raises(ValueError, match=fragment):
            update_task_details(task, changes)

    @pytest.mark.parametrize(
        "label, expected",
        [("Vorteil & Dauer", "BenefitDuration"), ("Fixer Termin", "FixedAppointment"), ("Deadline", "Deadline")],
    )
    def test_legacy_type_labels(self, label, expected):
        from todo_scheduler.edits import update_task_details

        assert update_task_details(deadline("a", None, 1), {"type": label}).type.value == expected

    def test_type_enum_accepted(self):
        from todo_scheduler.edits import update_task_details
        from todo_scheduler.types import TaskType

        updated = update_task_details(flexible("a", 1), {"type": TaskType.FIXED_APPOINTMENT})
        assert updated.type is TaskType.FIXED_APPOINTMENT

    def test_unknown_type_rejected(self):
        from todo_scheduler.edits import update_task_details

        with pytest.raises(ValueError, match="Unknown task type"):
            update_task_details(flexible("a", 1), {"type": "Meeting"})


class TestSetCompleted:

    def test_complete_and_reopen(self):
        from todo_scheduler.edits import set_completed

        now = dt("tue", "12:00")
        task = flexible("a", 1, manual_date=day_date("wed"))
        done = set_completed(task, True, now)
        assert done.completed is True
        assert done.completed_at == now
        assert not done.is_manually_scheduled

        reopened = set_completed(done, False, now)
        assert reopened.completed is False
        assert reopened.completed_at is None

    def test_completed_task_leaves_schedule(self):
        from todo_scheduler.edits import set_completed
        from todo_scheduler.planner import recalculate_schedule
        from conftest import snapshot

        tasks = [flexible("a", 1), flexible("b", 1)]
        tasks[0] = set_completed(tasks[0], True, dt("mon", "09:00"))
        items = recalculate_schedule(snapshot(tasks))
        assert [i.task_id for i in items] == ["b"]


class TestMoveTask:

    def _tasks(self):
        return [flexible(x, 1) for x in "abcd"]

    @pytest.mark.parametrize(
        "dragged, target, before, expected",
        [
            ("d", "a", True, "dabc"),
            ("a", "c", False, "bcad"),
            ("a", "c", True, "bacd"),
            ("b", None, True, "acdb"),
            ("b", "zz", False, "acdb"),
            ("zz", "a", True, "abcd"),
        ],
    )
    def test_reorder(self, dragged, target, before, expected):
        from todo_scheduler.edits import move_task

        result = move_task(self._tasks(), dragged, target, before)
        assert "".join(t.id for t in result) == expected

    def test_drop_on_date_pins(self):
        from todo_scheduler.edits import move_task

        result = move_task(self._tasks(), "c", "a", True, new_date=day_date("thu"))
        assert result[0].id == "c"
        assert result[0].manual_date == day_date("thu")
        assert not any(t.is_manually_scheduled for t in result[1:])

    def test_drop_date_as_iso_string(self):
        from todo_scheduler.edits import move_task

        result = move_task(self._tasks(), "a", None, True, new_date="2025-01-09")
        assert result[-1].manual_date == day_date("thu")

    def test_input_not_mutated(self):
        from todo_scheduler.edits import move_task

        tasks = self._tasks()
        move_task(tasks, "d", "a", True)
        assert [t.id for t in tasks] == ["a", "b", "c", "d"]

    def test_order_used_without_auto_priority(self):
        from todo_scheduler.edits import move_task
        from todo_scheduler.planner import recalculate_schedule
        from conftest import make_settings, snapshot

        tasks = [flexible("a", 8, benefit=800), flexible("b", 8)]
        moved = move_task(tasks, "b", "a", True)
        items = recalculate_schedule(
            snapshot(moved, settings=make_settings("standard", autoPriority=False))
        )
        assert [(i.task_id, i.planned_date) for i in items] == [
            ("b", day_date("mon")),
            ("a", day_date("tue")),
        ]
