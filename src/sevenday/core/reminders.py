"""Reminder trigger computation - no I/O dependencies."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum

from .calendar import DayLabel, Weekday, days_until_weekday
from .errors import InvalidTransition
from .recurrence import reminds_on_weekday
from .tasks import MS_PER_MINUTE, Task

logger = logging.getLogger(__name__)

SNOOZE_DELAY = timedelta(minutes=5)
FALLBACK_DELAY = timedelta(hours=1)
MAX_DAY_ADVANCES = 2


@dataclass(frozen=True)
class NoReminder:
    """No reminder should be scheduled, and why."""

    reason: str


def _at_time_of_day(d: date, due_time: int, tz: tzinfo | None) -> datetime:
    # Wall-clock offset from midnight, truncated to the minute; DST shifts are ignored.
    minutes = due_time // MS_PER_MINUTE
    return datetime.combine(d, time.min, tzinfo=tz) + timedelta(minutes=minutes)


def next_trigger(task: Task, now: datetime | None = None) -> datetime | NoReminder:
    """
    Instant at which a task's reminder should fire.

    Pure function of (task, now). Always returns a datetime strictly after
    now, or NoReminder. Daily tasks only ever get today's (or the next
    day's) trigger; callers re-run this daily rather than searching ahead.

    Order of rules:
      1. Daily tasks with a reminder-day mask skip days outside the mask.
      2. Candidate is today at the due time minus the lead.
      3. A due date replaces the candidate's date.
      4. Otherwise a weekday binding moves it to the next such weekday,
         a full week ahead if that is today and the time has passed.
      5. Otherwise a due time already passed today moves it to tomorrow.
      6. Still not in the future: add a day, at most twice, then fall
         back to now + 1 hour.
    """
    now = now or datetime.now()

    if task.due_time is None:
        return NoReminder("task has no due time")
    if task.reminder_lead_minutes is None or task.reminder_lead_minutes < 0:
        return NoReminder("no reminder requested")

    today = now.date()
    weekday = Weekday.of(today)
    if task.is_daily and task.reminder_days and not reminds_on_weekday(task, weekday):
        return NoReminder(f"reminders are off on {weekday.label}")

    lead = timedelta(minutes=task.reminder_lead_minutes)
    label = task.day_label()

    if task.due_date is not None:
        candidate = _at_time_of_day(task.due_date, task.due_time, now.tzinfo) - lead
    elif isinstance(label, DayLabel) and label.is_weekday:
        candidate = _at_time_of_day(today, task.due_time, now.tzinfo) - lead
        advance = days_until_weekday(label.weekday, today)
        if advance == 0 and candidate <= now:
            advance = 7
        candidate += timedelta(days=advance)
    else:
        due = _at_time_of_day(today, task.due_time, now.tzinfo)
        if due <= now:
            due += timedelta(days=1)
        candidate = due - lead

    for _ in range(MAX_DAY_ADVANCES):
        if candidate > now:
            break
        candidate += timedelta(days=1)

    if candidate <= now:
        logger.warning(
            f"Reminder for task {task.id} ({task.description!r}) is still in the past at "
            f"{candidate.isoformat()}, falling back to one hour from now"
        )
        candidate = now + FALLBACK_DELAY

    return candidate


def snooze_trigger(now: datetime | None = None) -> datetime:
    """Snoozed reminders fire a fixed delay from now."""
    return (now or datetime.now()) + SNOOZE_DELAY


class ReminderState(Enum):
    """Lifecycle of one task's reminder, as tracked by a dispatcher."""

    UNSCHEDULED = "unscheduled"
    SCHEDULED = "scheduled"
    FIRED = "fired"
    SNOOZED = "snoozed"
    COMPLETED = "completed"
    DELETED = "deleted"
    CANCELLED = "cancelled"


_TRANSITIONS: dict[ReminderState, frozenset[ReminderState]] = {
    ReminderState.UNSCHEDULED: frozenset({ReminderState.SCHEDULED}),
    ReminderState.SCHEDULED: frozenset(
        {
            ReminderState.SCHEDULED,
            ReminderState.FIRED,
            ReminderState.COMPLETED,
            ReminderState.DELETED,
            ReminderState.CANCELLED,
        }
    ),
    ReminderState.FIRED: frozenset(
        {
            ReminderState.SCHEDULED,
            ReminderState.SNOOZED,
            ReminderState.COMPLETED,
            ReminderState.DELETED,
            ReminderState.CANCELLED,
        }
    ),
    ReminderState.SNOOZED: frozenset({ReminderState.SCHEDULED}),
    # A completed or cancelled task can be re-armed (un-completed, edited).
    ReminderState.COMPLETED: frozenset({ReminderState.SCHEDULED}),
    ReminderState.CANCELLED: frozenset({ReminderState.SCHEDULED}),
    ReminderState.DELETED: frozenset(),
}


def can_transition(current: ReminderState, target: ReminderState) -> bool:
    return target in _TRANSITIONS[current]


def transition(current: ReminderState, target: ReminderState) -> ReminderState:
    """Return target if the move is legal, else raise InvalidTransition."""
    if not can_transition(current, target):
        raise InvalidTransition(f"Reminder cannot go from {current.value} to {target.value}")
    return target
