"""Recurrence evaluation for recurring tasks - no I/O dependencies."""

from .calendar import Weekday
from .tasks import Task


def appears_on_offset(task: Task, offset: int) -> bool:
    """
    Whether a recurring task shows up in the bucket at a day offset.

    Daily tasks appear in every day bucket. Weekly, biweekly, monthly and
    yearly tasks are treated as appearing this week regardless of their
    cadence; occurrence tracking is not modelled.
    """
    # TODO: check biweekly/monthly/yearly cadence against an anchor date
    # once tasks carry one.
    return True


def is_completed_on_offset(task: Task, offset: int) -> bool:
    """
    Completion as shown on one day's instance.

    A daily task only shows completed on today's instance. Other recurring
    tasks share one completion flag across all occurrences.
    """
    if task.is_daily:
        return offset == 0 and task.is_completed
    return task.is_completed


def reminds_on_weekday(task: Task, weekday: Weekday | int) -> bool:
    """An empty or absent reminder-day mask means every day."""
    if not task.reminder_days:
        return True
    return int(weekday) in task.reminder_days


def can_complete_on_offset(task: Task, offset: int) -> bool:
    """
    Daily tasks can only be completed from today's instance.

    Un-completing is always allowed, as is completing any other task.
    """
    if not task.is_daily or task.is_completed:
        return True
    return offset == 0
