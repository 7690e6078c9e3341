"""Trigger dispatcher interface."""

from datetime import datetime
from typing import Protocol

from sevenday.core.reminders import ReminderState


class TriggerDispatcher(Protocol):
    """Interface for arranging reminder callbacks at future instants."""

    def schedule(self, task_id: int, instant: datetime) -> None:
        """Fire a reminder for task_id at instant, replacing any earlier one."""
        ...

    def cancel(self, task_id: int, outcome: ReminderState = ReminderState.CANCELLED) -> None:
        """Drop any pending reminder for task_id. No-op if none.

        outcome records why: cancelled, completed or deleted.
        """
        ...

    def schedule_snooze(self, task_id: int) -> None:
        """Fire the reminder again a fixed five minutes from now."""
        ...
