"""Tests for the shared workflow layer."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from sevenday.adapters.json_store import JsonTaskStore
from sevenday.adapters.memory_store import InMemoryTaskStore
from sevenday.adapters.scheduler_dispatcher import SchedulerDispatcher
from sevenday.core.calendar import DayLabel, Weekday
from sevenday.core.categorize import Bucket
from sevenday.core.errors import CompletionNotAllowed, InvalidMove, InvalidTask, TaskNotFound
from sevenday.core.reminders import NoReminder, ReminderState
from sevenday.core.tasks import RecurrenceType, Task, time_of_day
from sevenday.workflows import TaskBoard


@pytest.fixture
def now():
    return datetime(2025, 1, 13, 8, 0)


@pytest.fixture
def store():
    return InMemoryTaskStore()


@pytest.fixture
def dispatcher():
    return MagicMock()


@pytest.fixture
def board(store, dispatcher, now):
    return TaskBoard(store, dispatcher, clock=lambda: now)


def _task(**fields):
    fields.setdefault("description", "Water plants")
    return Task(id=0, **fields)


class TestAddTask:
    def test_assigns_id_and_persists(self, board, store):
        stored = board.add_task(_task())
        assert stored.id == 1
        assert store.get_by_id(1).description == "Water plants"

    def test_rejects_invalid(self, board, store):
        with pytest.raises(InvalidTask):
            board.add_task(_task(description=""))
        assert store.get_all() == []

    def test_schedules_reminder(self, board, dispatcher):
        stored = board.add_task(_task(due_time=time_of_day(9), reminder_lead_minutes=15))
        dispatcher.schedule.assert_called_once_with(stored.id, datetime(2025, 1, 13, 8, 45))

    def test_no_reminder_cancels(self, board, dispatcher):
        stored = board.add_task(_task())
        dispatcher.cancel.assert_called_once_with(stored.id, ReminderState.CANCELLED)
        dispatcher.schedule.assert_not_called()

    def test_notifies_subscribers(self, board):
        listener = MagicMock()
        board.subscribe(listener)
        board.add_task(_task(day_of_week=DayLabel.MONDAY))
        (categories,) = listener.call_args.args
        assert categories[0].label == Weekday.MONDAY


class TestToggleComplete:
    def test_completion_cancels_reminder(self, board, dispatcher, now):
        stored = board.add_task(_task(due_time=time_of_day(9), reminder_lead_minutes=0))
        updated = board.toggle_complete(stored.id)
        assert updated.is_completed
        assert updated.completion_instant == now
        dispatcher.cancel.assert_called_with(stored.id, ReminderState.COMPLETED)

    def test_uncomplete_reschedules(self, board, dispatcher):
        stored = board.add_task(_task(due_time=time_of_day(9), reminder_lead_minutes=0))
        board.toggle_complete(stored.id)
        dispatcher.schedule.reset_mock()
        board.toggle_complete(stored.id)
        dispatcher.schedule.assert_called_once()

    def test_daily_future_instance_rejected(self, board, store):
        stored = board.add_task(_task(is_recurring=True, recurrence_type=RecurrenceType.DAILY))
        with pytest.raises(CompletionNotAllowed):
            board.toggle_complete(stored.id, day_offset=2)
        assert not store.get_by_id(stored.id).is_completed

    def test_missing_task(self, board):
        with pytest.raises(TaskNotFound):
            board.toggle_complete(42)


class TestMoveAndReorder:
    def test_move(self, board, store):
        stored = board.add_task(_task(day_of_week=DayLabel.MONDAY))
        board.move(stored.id, Bucket.SOON)
        assert store.get_by_id(stored.id).day_of_week is DayLabel.SOON
        assert board.view().find(Bucket.SOON) is not None

    def test_reorder_persists_positions(self, board, store):
        first = board.add_task(_task(description="a", day_of_week=DayLabel.MONDAY, due_time=time_of_day(8)))
        second = board.add_task(_task(description="b", day_of_week=DayLabel.MONDAY, due_time=time_of_day(10)))
        changed = board.reorder(Weekday.MONDAY, second.id, 0)
        assert [t.id for t in changed] == [second.id]
        assert store.get_by_id(second.id).manual_position == 0
        items = board.view().find(Weekday.MONDAY).items
        assert [i.id for i in items] == [second.id, first.id]

    def test_reorder_empty_bucket(self, board):
        with pytest.raises(InvalidMove):
            board.reorder(Weekday.FRIDAY, 1, 0)

    def test_unpin(self, board, store):
        stored = board.add_task(_task(manual_position=1))
        board.unpin(stored.id)
        assert store.get_by_id(stored.id).manual_position is None


class TestDeleteTask:
    def test_removes_and_cancels(self, board, store, dispatcher):
        stored = board.add_task(_task())
        board.delete_task(stored.id)
        assert store.get_all() == []
        dispatcher.cancel.assert_called_with(stored.id, ReminderState.DELETED)

    def test_missing_task(self, board):
        with pytest.raises(TaskNotFound):
            board.delete_task(5)


class TestReminders:
    def test_sync_without_dispatcher(self, store, now):
        board = TaskBoard(store, clock=lambda: now)
        task = board.add_task(_task(due_time=time_of_day(9), reminder_lead_minutes=0))
        assert board.sync_reminder(task) == datetime(2025, 1, 13, 9, 0)

    def test_completed_has_no_reminder(self, board):
        result = board.sync_reminder(Task(id=1, description="x", is_completed=True,
                                          due_time=time_of_day(9), reminder_lead_minutes=0))
        assert isinstance(result, NoReminder)

    def test_refresh_counts_scheduled(self, board, store, dispatcher):
        store.insert(Task(id=0, description="a", due_time=time_of_day(9), reminder_lead_minutes=5))
        store.insert(Task(id=0, description="b"))
        assert board.refresh_reminders() == 1

    def test_snooze_delegates(self, board, dispatcher):
        stored = board.add_task(_task())
        board.snooze(stored.id)
        dispatcher.schedule_snooze.assert_called_once_with(stored.id)

    def test_snooze_needs_dispatcher(self, store):
        board = TaskBoard(store)
        stored = board.add_task(_task())
        with pytest.raises(RuntimeError):
            board.snooze(stored.id)


class TestSearch:
    def test_set_search_filters_view(self, board):
        board.add_task(_task(description="Buy milk", day_of_week=DayLabel.MONDAY))
        board.add_task(_task(description="Call mom", day_of_week=DayLabel.MONDAY))
        result = board.set_search("milk")
        assert [i.description for i in result.categories[0].items] == ["Buy milk"]
        assert board.view("").categories[0].items[1].description == "Call mom"


class TestStableIds:
    def test_add_after_deleting_newest_task(self, tmp_path, now):
        dispatcher = SchedulerDispatcher(scheduler=BackgroundScheduler(), clock=lambda: now)
        board = TaskBoard(JsonTaskStore(tmp_path / "tasks.json"), dispatcher, clock=lambda: now)

        def add(description):
            return board.add_task(_task(description=description, due_time=time_of_day(9), reminder_lead_minutes=0))

        add("a")
        b = add("b")
        board.delete_task(b.id)
        c = add("c")

        assert c.id != b.id
        assert dispatcher.state(b.id) is ReminderState.DELETED
        assert dispatcher.state(c.id) is ReminderState.SCHEDULED
        assert dispatcher.trigger_for(c.id) == datetime(2025, 1, 13, 9, 0)
