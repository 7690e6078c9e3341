"""Shared workflow layer between the engine, the task store and reminders.

TaskBoard is the single writer over the task list: every mutation goes
through it under one lock, is persisted, keeps the task's reminder in
step, and triggers a full re-categorization for subscribers.
"""

import logging
import threading
from datetime import date, datetime
from typing import Callable

from .core.calendar import DayLabel, Weekday
from .core.categorize import Bucket, Category, CategorizationResult, categorize_report
from .core.errors import InvalidMove, TaskNotFound
from .core.mutations import (
    DragTransaction,
    begin_drag,
    edit_task,
    end_drag,
    move_to_category,
    toggle_completion,
    unpin,
)
from .core.reminders import NoReminder, ReminderState, next_trigger
from .core.tasks import Task, validate_task
from .ports import TaskStore, TriggerDispatcher

logger = logging.getLogger(__name__)

Listener = Callable[[list[Category]], None]


class TaskBoard:
    """Coordinates user actions, storage, categorization and reminders."""

    def __init__(
        self,
        store: TaskStore,
        dispatcher: TriggerDispatcher | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.dispatcher = dispatcher
        self.clock = clock or datetime.now
        self.search_query = ""
        self.include_completed = False
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()

    # ============== Views ==============

    def today(self) -> date:
        return self.clock().date()

    def view(self, search_query: str | None = None, include_completed: bool | None = None) -> CategorizationResult:
        """Categorize the current store snapshot."""
        query = self.search_query if search_query is None else search_query
        include = self.include_completed if include_completed is None else include_completed
        return categorize_report(self.store.get_all(), query, include, as_of=self.today())

    def set_search(self, search_query: str, include_completed: bool = False) -> CategorizationResult:
        self.search_query = search_query
        self.include_completed = include_completed
        return self._publish()

    def subscribe(self, listener: Listener) -> None:
        """Receive the categorized view after every mutation."""
        self._listeners.append(listener)

    def _publish(self) -> CategorizationResult:
        result = self.view()
        for warning in result.warnings:
            logger.warning(f"Task with unknown day label {warning.raw!r} placed in Waiting")
        for listener in self._listeners:
            listener(result.categories)
        return result

    def category(self, label: Weekday | Bucket) -> Category:
        found = self.view().find(label)
        if found is None:
            raise InvalidMove(f"{label.label} has no tasks")
        return found

    # ============== Mutations ==============

    def get(self, task_id: int) -> Task:
        task = self.store.get_by_id(task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    def add_task(self, task: Task) -> Task:
        validate_task(task)
        with self._lock:
            stored = self.store.insert(task)
            logger.info(f"Added task {stored.id} ({stored.description!r})")
            self.sync_reminder(stored)
            self._publish()
        return stored

    def edit_task(self, task_id: int, **changes) -> Task:
        with self._lock:
            updated = edit_task(self.get(task_id), **changes)
            self.store.update(updated)
            self.sync_reminder(updated)
            self._publish()
        return updated

    def toggle_complete(self, task_id: int, day_offset: int = 0) -> Task:
        with self._lock:
            updated = toggle_completion(self.get(task_id), self.clock(), day_offset)
            self.store.update(updated)
            state = "completed" if updated.is_completed else "reopened"
            logger.info(f"Task {task_id} {state}")
            self.sync_reminder(updated)
            self._publish()
        return updated

    def move(self, task_id: int, target: Weekday | Bucket | DayLabel) -> Task:
        """Handle a task dragged into another category."""
        with self._lock:
            updated = move_to_category(self.get(task_id), target)
            self.store.update(updated)
            logger.info(f"Moved task {task_id} to {updated.day_of_week.value}")
            self.sync_reminder(updated)
            self._publish()
        return updated

    def unpin(self, task_id: int) -> Task:
        with self._lock:
            updated = unpin(self.get(task_id))
            self.store.update(updated)
            self._publish()
        return updated

    def delete_task(self, task_id: int) -> None:
        with self._lock:
            task = self.get(task_id)
            self.store.delete(task)
            if self.dispatcher is not None:
                self.dispatcher.cancel(task_id, ReminderState.DELETED)
            logger.info(f"Deleted task {task_id}")
            self._publish()

    def begin_drag(self, label: Weekday | Bucket, task_id: int) -> DragTransaction:
        """Start a reorder within a bucket of the current view."""
        return begin_drag(self.category(label), task_id)

    def end_drag(self, txn: DragTransaction) -> list[Task]:
        """Persist the manual positions produced by a finished drag."""
        with self._lock:
            updated = end_drag(txn)
            for task in updated:
                self.store.update(task)
            if updated:
                logger.info(f"Reordered {len(updated)} task(s) in {txn.label.label}")
                self._publish()
        return updated

    def reorder(self, label: Weekday | Bucket, task_id: int, position: int) -> list[Task]:
        txn = self.begin_drag(label, task_id)
        txn.move(position)
        return self.end_drag(txn)

    # ============== Reminders ==============

    def sync_reminder(self, task: Task) -> datetime | NoReminder:
        """Schedule, reschedule or cancel a task's reminder to match its state."""
        if task.is_completed:
            result: datetime | NoReminder = NoReminder("task is completed")
            outcome = ReminderState.COMPLETED
        else:
            result = next_trigger(task, self.clock())
            outcome = ReminderState.CANCELLED

        if self.dispatcher is None:
            return result
        if isinstance(result, NoReminder):
            logger.debug(f"No reminder for task {task.id}: {result.reason}")
            self.dispatcher.cancel(task.id, outcome)
        else:
            self.dispatcher.schedule(task.id, result)
        return result

    def refresh_reminders(self) -> int:
        """Recompute every task's reminder. Returns how many were scheduled."""
        scheduled = 0
        with self._lock:
            for task in self.store.get_all():
                if isinstance(self.sync_reminder(task), datetime):
                    scheduled += 1
        logger.info(f"Refreshed reminders: {scheduled} scheduled")
        return scheduled

    def snooze(self, task_id: int) -> None:
        self.get(task_id)
        if self.dispatcher is None:
            raise RuntimeError("No trigger dispatcher configured")
        self.dispatcher.schedule_snooze(task_id)
