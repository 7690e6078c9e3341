"""Pure task domain model - no I/O dependencies."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from .calendar import DAYS_IN_WEEK, DayLabel, UnknownLabel, Weekday, parse_day_label
from .errors import InvalidTask

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR


class RecurrenceType(Enum):
    """How often a recurring task repeats."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    BIWEEKLY = "Biweekly"
    MONTHLY = "Monthly"
    YEARLY = "Yearly"

    @classmethod
    def parse(cls, value: "RecurrenceType | str | None") -> "RecurrenceType | None":
        """Case-insensitive lookup by stored name. Raises InvalidTask if unknown."""
        if value is None or isinstance(value, RecurrenceType):
            return value
        key = value.strip().lower()
        for member in cls:
            if member.value.lower() == key:
                return member
        raise InvalidTask(f"Unknown recurrence type: {value!r}")


@dataclass
class Task:
    """A to-do item as held by the task store."""

    id: int
    description: str
    due_date: date | None = None
    due_time: int | None = None  # ms since local midnight
    day_of_week: DayLabel | str | None = None
    is_recurring: bool = False
    recurrence_type: RecurrenceType | None = None
    reminder_lead_minutes: int | None = None
    reminder_days: frozenset[int] | None = None  # 0=Sunday..6=Saturday
    is_completed: bool = False
    completion_instant: datetime | None = None
    manual_position: int | None = None
    priority: int = 0

    @property
    def is_daily(self) -> bool:
        return self.is_recurring and self.recurrence_type is RecurrenceType.DAILY

    @property
    def is_manual(self) -> bool:
        return self.manual_position is not None

    def day_label(self) -> DayLabel | UnknownLabel | None:
        """The day binding normalized to the closed DayLabel set."""
        return parse_day_label(self.day_of_week)

    def to_dict(self) -> dict:
        """Serialize to the stored JSON shape."""
        day = self.day_of_week
        if isinstance(day, DayLabel):
            day = day.value
        return {
            "id": self.id,
            "description": self.description,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "dueTime": self.due_time,
            "dayOfWeek": day,
            "isRecurring": self.is_recurring,
            "recurrenceType": self.recurrence_type.value if self.recurrence_type else None,
            "reminderOffset": self.reminder_lead_minutes,
            "reminderDays": sorted(self.reminder_days) if self.reminder_days else None,
            "isCompleted": self.is_completed,
            "completionDate": self.completion_instant.isoformat() if self.completion_instant else None,
            "manualPosition": self.manual_position,
            "priority": self.priority,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create Task from a stored JSON record."""
        due = None
        if data.get("dueDate"):
            due = date.fromisoformat(data["dueDate"].split("T")[0])

        completed_at = None
        if data.get("completionDate"):
            completed_at = datetime.fromisoformat(data["completionDate"])

        day = data.get("dayOfWeek")
        if day is not None:
            parsed = parse_day_label(day)
            # Unrecognized labels stay raw so categorization can report them
            day = parsed if isinstance(parsed, DayLabel) else day

        return cls(
            id=data.get("id", 0) or 0,
            description=data.get("description", ""),
            due_date=due,
            due_time=data.get("dueTime"),
            day_of_week=day,
            is_recurring=bool(data.get("isRecurring", False)),
            recurrence_type=_stored_recurrence(data),
            reminder_lead_minutes=data.get("reminderOffset"),
            reminder_days=_stored_reminder_days(data),
            is_completed=bool(data.get("isCompleted", False)),
            completion_instant=completed_at,
            manual_position=data.get("manualPosition"),
            priority=data.get("priority", 0) or 0,
        )


def _stored_recurrence(data: dict) -> RecurrenceType | None:
    # A bad stored value must not hide the rest of the task list
    try:
        return RecurrenceType.parse(data.get("recurrenceType"))
    except InvalidTask:
        logger.warning(
            f"Task {data.get('id')} has unknown recurrence type {data.get('recurrenceType')!r}, ignoring it"
        )
        return None


def _stored_reminder_days(data: dict) -> frozenset[int] | None:
    """Reminder mask from a stored record, skipping entries that are not weekday indices."""
    value = data.get("reminderDays")
    if value is None:
        return None
    entries = value.split(",") if isinstance(value, str) else value

    days = set()
    for entry in entries:
        if isinstance(entry, str) and not entry.strip():
            continue
        try:
            day = int(entry)
        except (TypeError, ValueError):
            day = None
        if day is None or not 0 <= day < DAYS_IN_WEEK:
            logger.warning(f"Task {data.get('id')} has invalid reminder day {entry!r}, skipping it")
            continue
        days.add(day)
    return frozenset(days) or None


def parse_reminder_days(value: str | list[int] | set[int] | frozenset[int] | None) -> frozenset[int] | None:
    """Accept a list of weekday indices or the legacy "0,2,4" string."""
    if value is None:
        return None
    if isinstance(value, str):
        parts = [p.strip() for p in value.split(",") if p.strip()]
        try:
            value = [int(p) for p in parts]
        except ValueError:
            raise InvalidTask(f"Invalid reminder days: {value!r}")
    days = frozenset(int(d) for d in value)
    return days or None


def time_of_day(hour: int, minute: int = 0) -> int:
    """Milliseconds since midnight for a wall-clock time."""
    return hour * MS_PER_HOUR + minute * MS_PER_MINUTE


def parse_time_of_day(value: str) -> int:
    """Parse "HH:MM" into milliseconds since midnight."""
    try:
        hour_str, minute_str = value.strip().split(":")
        hour, minute = int(hour_str), int(minute_str)
    except ValueError:
        raise InvalidTask(f"Invalid time of day: {value!r} (expected HH:MM)")
    if not (0 <= hour < 24 and 0 <= minute < 60):
        raise InvalidTask(f"Invalid time of day: {value!r}")
    return time_of_day(hour, minute)


def format_time_of_day(ms: int) -> str:
    return f"{ms // MS_PER_HOUR:02d}:{(ms % MS_PER_HOUR) // MS_PER_MINUTE:02d}"


def validate_task(task: Task) -> Task:
    """
    Reject tasks that must never reach categorization.

    Returns the task unchanged so callers can validate inline.
    """
    if not task.description or not task.description.strip():
        raise InvalidTask("Task description must not be empty")
    if task.is_recurring and task.recurrence_type is None:
        raise InvalidTask(f"Recurring task {task.description!r} has no recurrence type")
    if task.due_time is not None and not (0 <= task.due_time < MS_PER_DAY):
        raise InvalidTask(f"Due time {task.due_time} is outside a single day")
    if task.reminder_lead_minutes is not None and task.reminder_lead_minutes < 0:
        raise InvalidTask("Reminder lead time must not be negative")
    if task.reminder_days and any(not 0 <= d < DAYS_IN_WEEK for d in task.reminder_days):
        raise InvalidTask(f"Reminder days must be weekday indices 0-6, got {sorted(task.reminder_days)}")
    if task.manual_position is not None and task.manual_position < 0:
        raise InvalidTask("Manual position must not be negative")
    return task


class _ItemView:
    """Read-only accessors shared by real and virtual bucket items."""

    task: Task

    @property
    def id(self) -> int:
        return self.task.id

    @property
    def description(self) -> str:
        return self.task.description

    @property
    def due_time(self) -> int | None:
        return self.task.due_time

    @property
    def priority(self) -> int:
        return self.task.priority

    @property
    def manual_position(self) -> int | None:
        return self.task.manual_position

    @property
    def is_completed(self) -> bool:
        return self.task.is_completed

    @property
    def completion_instant(self) -> datetime | None:
        return self.task.completion_instant


@dataclass(frozen=True)
class RealItem(_ItemView):
    """A stored task placed directly in a bucket."""

    task: Task
    is_virtual = False


@dataclass(frozen=True)
class VirtualInstance(_ItemView):
    """
    Display-only copy of a daily task for one day of the week.

    Shares the source task's id. Completion is per-day: only today's
    instance can show as completed. Never written back to the store.
    """

    source: Task
    day_offset: int
    weekday: Weekday
    completed: bool
    is_virtual = True

    @property
    def task(self) -> Task:
        return self.source

    @property
    def is_completed(self) -> bool:
        return self.completed

    @property
    def day_label(self) -> DayLabel:
        return DayLabel.for_weekday(self.weekday)


Item = RealItem | VirtualInstance
