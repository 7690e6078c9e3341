"""APScheduler trigger dispatcher adapter."""

import logging
import threading
from datetime import datetime
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.date import DateTrigger

from sevenday.core.reminders import ReminderState, can_transition, snooze_trigger, transition

logger = logging.getLogger(__name__)

DAILY_REFRESH_JOB_ID = "daily_refresh"


def _reminder_job_id(task_id: int) -> str:
    return f"reminder-{task_id}"


def _snooze_job_id(task_id: int) -> str:
    return f"snooze-{task_id}"


def log_reminder(task_id: int) -> None:
    logger.info(f"Reminder due for task {task_id}")


class SchedulerDispatcher:
    """
    APScheduler-backed reminder dispatcher.

    Implements TriggerDispatcher protocol. Each task has at most one
    pending reminder job and one pending snooze job, both keyed by task id.
    Also tracks the reminder lifecycle per task and refuses illegal moves.
    """

    def __init__(
        self,
        scheduler: BackgroundScheduler | None = None,
        on_fire: Callable[[int], None] | None = None,
        clock: Callable[[], datetime] | None = None,
        timezone: str | None = None,
    ):
        if scheduler is None:
            scheduler = BackgroundScheduler(timezone=timezone) if timezone else BackgroundScheduler()
        self.scheduler = scheduler
        self.on_fire = on_fire or log_reminder
        self.clock = clock or datetime.now
        self._states: dict[int, ReminderState] = {}
        self._triggers: dict[int, datetime] = {}
        # Job callbacks run on scheduler worker threads
        self._lock = threading.Lock()

    def state(self, task_id: int) -> ReminderState:
        return self._states.get(task_id, ReminderState.UNSCHEDULED)

    def trigger_for(self, task_id: int) -> datetime | None:
        """Instant of the pending reminder or snooze, if any."""
        return self._triggers.get(task_id)

    def _remove_job(self, job_id: str) -> None:
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            logger.debug(f"No pending job {job_id}")

    def _add_job(self, job_id: str, task_id: int, instant: datetime) -> None:
        # Remove first: a scheduler that is not yet running keeps
        # duplicates of pending jobs even with replace_existing.
        self._remove_job(job_id)
        self.scheduler.add_job(
            self.fire,
            DateTrigger(run_date=instant),
            args=[task_id],
            id=job_id,
            replace_existing=True,
        )
        self._triggers[task_id] = instant

    def schedule(self, task_id: int, instant: datetime) -> None:
        with self._lock:
            self._states[task_id] = transition(self.state(task_id), ReminderState.SCHEDULED)
            self._remove_job(_snooze_job_id(task_id))
            self._add_job(_reminder_job_id(task_id), task_id, instant)
        logger.info(f"Scheduled reminder for task {task_id} at {instant.isoformat()}")

    def cancel(self, task_id: int, outcome: ReminderState = ReminderState.CANCELLED) -> None:
        with self._lock:
            self._remove_job(_reminder_job_id(task_id))
            self._remove_job(_snooze_job_id(task_id))
            self._triggers.pop(task_id, None)

            current = self.state(task_id)
            if not can_transition(current, outcome):
                logger.debug(f"Reminder for task {task_id} is {current.value}, nothing to cancel")
                return
            self._states[task_id] = outcome
        logger.info(f"Reminder for task {task_id} {outcome.value}")

    def schedule_snooze(self, task_id: int) -> None:
        instant = snooze_trigger(self.clock())
        with self._lock:
            state = transition(self.state(task_id), ReminderState.SNOOZED)
            self._states[task_id] = transition(state, ReminderState.SCHEDULED)
            self._remove_job(_reminder_job_id(task_id))
            self._add_job(_snooze_job_id(task_id), task_id, instant)
        logger.info(f"Snoozed reminder for task {task_id} until {instant.isoformat()}")

    def fire(self, task_id: int) -> None:
        """Job callback: mark the reminder fired and hand it to on_fire."""
        with self._lock:
            current = self.state(task_id)
            if not can_transition(current, ReminderState.FIRED):
                logger.warning(f"Ignoring reminder for task {task_id} in state {current.value}")
                return
            self._states[task_id] = ReminderState.FIRED
            self._triggers.pop(task_id, None)
        self.on_fire(task_id)

    def add_daily_refresh(self, func: Callable[[], object], hour: int, minute: int) -> None:
        """Run func once a day, e.g. to recompute daily tasks' reminders."""
        self.scheduler.add_job(
            func,
            CronTrigger(hour=hour, minute=minute),
            id=DAILY_REFRESH_JOB_ID,
            replace_existing=True,
        )
        logger.info(f"Scheduled daily reminder refresh at {hour:02d}:{minute:02d}")

    def start(self) -> None:
        self.scheduler.start()
        logger.info("Scheduler started")

    def shutdown(self) -> None:
        self.scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
