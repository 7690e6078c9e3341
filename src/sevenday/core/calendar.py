"""Pure calendar mapping - no I/O dependencies.

Day offsets are today-relative: offset 0 is today, offset 6 is six days
from now. Weekday indices run 0=Sunday..6=Saturday. All arithmetic is on
local calendar dates; nothing here converts between timezones.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum, IntEnum

logger = logging.getLogger(__name__)

DAYS_IN_WEEK = 7


class Weekday(IntEnum):
    """Weekday index, Sunday first."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def of(cls, d: date) -> "Weekday":
        """Weekday of a date. date.weekday() counts from Monday=0."""
        return cls((d.weekday() + 1) % DAYS_IN_WEEK)


class DayLabel(Enum):
    """Closed set of day bindings a task can carry.

    NONE, IMMEDIATE and SOON are pseudo-labels; the rest name weekdays.
    """

    NONE = "None"
    IMMEDIATE = "Immediate"
    SOON = "Soon"
    SUNDAY = "Sunday"
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"

    @property
    def weekday(self) -> Weekday | None:
        """The weekday this label names, or None for pseudo-labels."""
        return Weekday.__members__.get(self.name)

    @property
    def is_weekday(self) -> bool:
        return self.weekday is not None

    @classmethod
    def for_weekday(cls, weekday: Weekday) -> "DayLabel":
        return cls[weekday.name]


# Older clients stored the waiting bucket's name instead of "None".
_LABEL_ALIASES = {"waiting": DayLabel.NONE}


@dataclass(frozen=True)
class UnknownLabel:
    """A day label string that matches nothing in DayLabel."""

    raw: str


def parse_day_label(value: DayLabel | Weekday | str | None) -> DayLabel | UnknownLabel | None:
    """
    Normalize a stored day binding to a DayLabel.

    Matching is case-insensitive on the canonical English names. Returns
    None when there is no binding and UnknownLabel (after logging a
    warning) when the string is unrecognized. Never raises.
    """
    if value is None:
        return None
    if isinstance(value, DayLabel):
        return value
    if isinstance(value, Weekday):
        return DayLabel.for_weekday(value)

    key = str(value).strip().lower()
    for label in DayLabel:
        if label.value.lower() == key:
            return label
    if key in _LABEL_ALIASES:
        return _LABEL_ALIASES[key]

    logger.warning(f"Unknown day label: {value!r}")
    return UnknownLabel(str(value))


def today_offset_for(label: DayLabel | Weekday | str, as_of: date | None = None) -> int | UnknownLabel:
    """
    Offset (0..6) of the next occurrence of a weekday, 0 if it is today.

    Pseudo-labels and unrecognized strings return UnknownLabel.
    """
    as_of = as_of or date.today()
    parsed = parse_day_label(label)
    if not isinstance(parsed, DayLabel) or parsed.weekday is None:
        return parsed if isinstance(parsed, UnknownLabel) else UnknownLabel(str(label))
    return days_until_weekday(parsed.weekday, as_of)


def label_for_offset(offset: int, as_of: date | None = None) -> Weekday:
    """Weekday at a today-relative offset, wrapping past Saturday."""
    as_of = as_of or date.today()
    return Weekday((Weekday.of(as_of) + offset) % DAYS_IN_WEEK)


def week_order(as_of: date | None = None) -> list[Weekday]:
    """The seven weekdays starting from today."""
    as_of = as_of or date.today()
    return [label_for_offset(i, as_of) for i in range(DAYS_IN_WEEK)]


def days_between(d: date, as_of: date | None = None) -> int:
    """Signed day difference from as_of to d (negative if d is past)."""
    as_of = as_of or date.today()
    return (d - as_of).days


def is_within_next_week(d: date, as_of: date | None = None) -> bool:
    """True for today and the six days after it."""
    return 0 <= days_between(d, as_of) < DAYS_IN_WEEK


def days_until_weekday(target: Weekday, as_of: date | None = None) -> int:
    """Days forward to the next target weekday, 0 if today is that weekday."""
    as_of = as_of or date.today()
    return (int(target) - int(Weekday.of(as_of)) + DAYS_IN_WEEK) % DAYS_IN_WEEK
