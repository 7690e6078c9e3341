"""Bucket tasks into a rolling seven-day view - no I/O dependencies."""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import NamedTuple

from .calendar import (
    DAYS_IN_WEEK,
    DayLabel,
    UnknownLabel,
    Weekday,
    days_between,
    days_until_weekday,
    label_for_offset,
)
from .ordering import sort_completed, sort_items
from .recurrence import appears_on_offset, is_completed_on_offset
from .tasks import Item, RealItem, Task, VirtualInstance

logger = logging.getLogger(__name__)


class Bucket(Enum):
    """Buckets that are not a day of the week."""

    OVERDUE = "Immediate"  # merged into today's bucket, never displayed
    SOON = "Soon"
    WAITING = "Waiting"
    COMPLETED = "Completed"

    @property
    def label(self) -> str:
        return self.value


Placement = int | Bucket


class Category(NamedTuple):
    """One displayed bucket: its label and ordered items."""

    label: Weekday | Bucket
    items: list[Item]
    offset: int | None = None

    @property
    def title(self) -> str:
        return self.label.label


@dataclass
class CategorizationResult:
    categories: list[Category]
    warnings: list[UnknownLabel] = field(default_factory=list)

    def find(self, label: Weekday | Bucket) -> Category | None:
        return next((c for c in self.categories if c.label == label), None)


def _place_by_date(due: date, as_of: date) -> Placement:
    days = days_between(due, as_of)
    if days < 0:
        return Bucket.OVERDUE
    if days < DAYS_IN_WEEK:
        return days
    return Bucket.WAITING


def classify_task(task: Task, as_of: date | None = None) -> tuple[Placement, UnknownLabel | None]:
    """
    Placement of a single non-daily task by its day binding and due date.

    A due date wins when it is past or within the next seven days, and
    whenever the day binding cannot place the task itself. Otherwise the
    day label decides: None waits, Immediate is overdue, Soon is soon and
    a weekday maps to its offset. Unknown labels wait and are returned so
    the caller can surface them.
    """
    as_of = as_of or date.today()
    label = task.day_label()
    unknown = label if isinstance(label, UnknownLabel) else None

    if task.due_date is not None:
        in_horizon = days_between(task.due_date, as_of) < DAYS_IN_WEEK
        if in_horizon or label is None or label is DayLabel.NONE or unknown:
            return _place_by_date(task.due_date, as_of), unknown

    if unknown:
        return Bucket.WAITING, unknown
    if label is None or label is DayLabel.NONE:
        return Bucket.WAITING, None
    if label is DayLabel.IMMEDIATE:
        return Bucket.OVERDUE, None
    if label is DayLabel.SOON:
        return Bucket.SOON, None
    return days_until_weekday(label.weekday, as_of), None


def daily_instances(task: Task, as_of: date | None = None) -> list[VirtualInstance]:
    """One virtual instance per day offset for a daily recurring task."""
    as_of = as_of or date.today()
    return [
        VirtualInstance(
            source=task,
            day_offset=offset,
            weekday=label_for_offset(offset, as_of),
            completed=is_completed_on_offset(task, offset),
        )
        for offset in range(DAYS_IN_WEEK)
    ]


def matches_search(task: Task, query: str) -> bool:
    return not query or query.lower() in task.description.lower()


def categorize_report(
    tasks: list[Task],
    search_query: str = "",
    include_completed: bool = False,
    as_of: date | None = None,
) -> CategorizationResult:
    """
    Bucket every task and order each bucket.

    Pure function - no I/O. Day buckets come first starting from today
    (overdue items merged into today), then Soon, Waiting and Completed.
    Empty buckets are omitted. Completed is hidden during a search unless
    include_completed is set.
    """
    as_of = as_of or date.today()
    query = search_query or ""

    days: list[list[Item]] = [[] for _ in range(DAYS_IN_WEEK)]
    special: dict[Bucket, list[Item]] = {b: [] for b in Bucket}
    warnings: list[UnknownLabel] = []

    for task in tasks:
        if not matches_search(task, query):
            continue

        if not task.is_recurring and task.is_completed:
            if task.completion_instant is not None:
                special[Bucket.COMPLETED].append(RealItem(task))
                continue
            logger.warning(
                f"Completed task {task.id} ({task.description!r}) has no completion instant, "
                "categorizing by day instead"
            )

        if task.is_daily:
            for instance in daily_instances(task, as_of):
                days[instance.day_offset].append(instance)
            continue

        placement, unknown = classify_task(task, as_of)
        if unknown is not None:
            warnings.append(unknown)

        if task.is_recurring:
            offset = placement if isinstance(placement, int) else 0
            if not appears_on_offset(task, offset):
                continue

        logger.debug(f"Task {task.id} ({task.description!r}) placed in {placement}")
        if isinstance(placement, int):
            days[placement].append(RealItem(task))
        else:
            special[placement].append(RealItem(task))

    categories: list[Category] = []
    for offset in range(DAYS_IN_WEEK):
        items = days[offset]
        if offset == 0:
            items = items + special[Bucket.OVERDUE]
        if items:
            categories.append(Category(label_for_offset(offset, as_of), sort_items(items), offset))

    for bucket in (Bucket.SOON, Bucket.WAITING):
        if special[bucket]:
            categories.append(Category(bucket, sort_items(special[bucket])))

    show_completed = not query or include_completed
    if show_completed and special[Bucket.COMPLETED]:
        categories.append(Category(Bucket.COMPLETED, sort_completed(special[Bucket.COMPLETED])))

    return CategorizationResult(categories=categories, warnings=warnings)


def categorize(
    tasks: list[Task],
    search_query: str = "",
    include_completed: bool = False,
    as_of: date | None = None,
) -> list[Category]:
    """Ordered (label, items) buckets for the presentation layer."""
    return categorize_report(tasks, search_query, include_completed, as_of).categories
