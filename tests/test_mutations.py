"""Tests for user-driven task mutations."""

from datetime import date, datetime

import pytest

from sevenday.core.calendar import DayLabel, Weekday
from sevenday.core.categorize import Bucket, Category, categorize, daily_instances
from sevenday.core.errors import CompletionNotAllowed, InvalidMove, InvalidTask
from sevenday.core.mutations import (
    begin_drag,
    edit_task,
    end_drag,
    move_to_category,
    reorder,
    toggle_completion,
    toggle_item_completion,
    unpin,
)
from sevenday.core.tasks import RealItem, RecurrenceType, Task, time_of_day


@pytest.fixture
def today():
    return date(2025, 1, 13)


@pytest.fixture
def now():
    return datetime(2025, 1, 13, 12, 0)


def _task(id, **fields):
    fields.setdefault("description", f"Task {id}")
    return Task(id=id, **fields)


def _category(*tasks, label=Weekday.MONDAY):
    return Category(label, [RealItem(t) for t in tasks], 0)


class TestToggleCompletion:
    def test_stamps_completion_instant(self, now):
        updated = toggle_completion(_task(1), now)
        assert updated.is_completed
        assert updated.completion_instant == now

    def test_uncomplete_clears_instant(self, now):
        done = _task(1, is_completed=True, completion_instant=now)
        updated = toggle_completion(done, now)
        assert not updated.is_completed
        assert updated.completion_instant is None

    def test_does_not_mutate_input(self, now):
        task = _task(1)
        toggle_completion(task, now)
        assert not task.is_completed

    def test_daily_only_from_today(self, now):
        daily = _task(1, is_recurring=True, recurrence_type=RecurrenceType.DAILY)
        with pytest.raises(CompletionNotAllowed):
            toggle_completion(daily, now, day_offset=3)
        assert toggle_completion(daily, now, day_offset=0).is_completed

    def test_virtual_instance_resolves_to_source(self, today, now):
        daily = _task(1, is_recurring=True, recurrence_type=RecurrenceType.DAILY)
        instances = daily_instances(daily, today)
        updated = toggle_item_completion(instances[0], now)
        assert isinstance(updated, Task)
        assert updated.id == 1 and updated.is_completed
        with pytest.raises(CompletionNotAllowed):
            toggle_item_completion(instances[2], now)


class TestEditAndUnpin:
    def test_unpin(self):
        assert unpin(_task(1, manual_position=2)).manual_position is None

    def test_edit_revalidates(self):
        with pytest.raises(InvalidTask):
            edit_task(_task(1), description="")

    def test_edit_cannot_change_id(self):
        with pytest.raises(InvalidMove):
            edit_task(_task(1), id=2)

    def test_edit_applies_changes(self):
        assert edit_task(_task(1), priority=3).priority == 3


class TestMoveToCategory:
    def test_to_weekday(self, today):
        task = _task(1, due_date=date(2025, 1, 14), manual_position=0)
        moved = move_to_category(task, Weekday.FRIDAY)
        assert moved.day_of_week is DayLabel.FRIDAY
        assert moved.due_date is None
        assert moved.manual_position is None
        assert categorize([moved], as_of=today)[0].label == Weekday.FRIDAY

    @pytest.mark.parametrize(
        "target, label",
        [
            (Bucket.SOON, DayLabel.SOON),
            (Bucket.WAITING, DayLabel.NONE),
            (Bucket.OVERDUE, DayLabel.IMMEDIATE),
            (DayLabel.TUESDAY, DayLabel.TUESDAY),
        ],
    )
    def test_bucket_targets(self, target, label):
        assert move_to_category(_task(1), target).day_of_week is label

    def test_cannot_move_into_completed(self):
        with pytest.raises(InvalidMove):
            move_to_category(_task(1), Bucket.COMPLETED)

    def test_cannot_move_daily(self):
        daily = _task(1, is_recurring=True, recurrence_type=RecurrenceType.DAILY)
        with pytest.raises(InvalidMove):
            move_to_category(daily, Weekday.TUESDAY)


class TestDrag:
    def test_pins_dragged_task_only(self):
        category = _category(
            _task(1, due_time=time_of_day(8)),
            _task(2, due_time=time_of_day(10)),
            _task(3, due_time=time_of_day(12)),
        )
        updated = reorder(category, 3, 0)
        assert [(t.id, t.manual_position) for t in updated] == [(3, 0)]

    def test_pinned_tasks_take_new_index(self):
        category = _category(
            _task(1, manual_position=0),
            _task(2, manual_position=1),
            _task(3),
        )
        updated = reorder(category, 3, 0)
        assert {t.id: t.manual_position for t in updated} == {3: 0, 1: 1, 2: 2}

    def test_no_move_changes_nothing(self):
        txn = begin_drag(_category(_task(1), _task(2)), 1)
        txn.move(0)
        assert end_drag(txn) == []

    def test_end_drag_is_single_use(self):
        txn = begin_drag(_category(_task(1), _task(2)), 1)
        txn.move(1)
        end_drag(txn)
        with pytest.raises(InvalidMove):
            end_drag(txn)
        with pytest.raises(InvalidMove):
            txn.move(0)

    def test_position_out_of_range(self):
        txn = begin_drag(_category(_task(1), _task(2)), 1)
        with pytest.raises(InvalidMove):
            txn.move(5)

    def test_task_not_in_bucket(self):
        with pytest.raises(InvalidMove):
            begin_drag(_category(_task(1)), 9)

    def test_completed_bucket_not_reorderable(self):
        with pytest.raises(InvalidMove):
            begin_drag(_category(_task(1), label=Bucket.COMPLETED), 1)

    def test_daily_instance_pins_source(self, today):
        daily = _task(1, is_recurring=True, recurrence_type=RecurrenceType.DAILY)
        other = _task(2, due_time=time_of_day(6))
        category = Category(Weekday.MONDAY, [RealItem(other), daily_instances(daily, today)[0]], 0)
        (updated,) = reorder(category, 1, 0)
        assert isinstance(updated, Task)
        assert updated.manual_position == 0
