"""Ordering within a bucket - no I/O dependencies."""

from functools import cmp_to_key

from .tasks import MS_PER_HOUR, Item

# Representative hour of day for a manually pinned position. Automatic
# items with a time are slotted around pinned items by comparing hours.
_POSITION_HOURS = {0: 3, 1: 9, 2: 15}
_LATE_POSITION_HOUR = 21


def position_hour(position: int) -> int:
    """Hour a manual position stands for: 0->3, 1->9, 2->15, 3+->21."""
    return _POSITION_HOURS.get(position, _LATE_POSITION_HOUR)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _compare_automatic(a: Item, b: Item) -> int:
    if a.due_time is not None and b.due_time is not None:
        if a.due_time != b.due_time:
            return _sign(a.due_time - b.due_time)
        return _sign(a.priority - b.priority)
    if a.due_time is not None:
        return -1
    if b.due_time is not None:
        return 1
    return _sign(a.priority - b.priority)


def compare_items(a: Item, b: Item) -> int:
    """
    Comparator for items sharing a bucket.

    Manual items sort by position. Automatic items sort by time of day,
    timed before untimed, priority breaking ties. A mixed pair compares
    the automatic item's hour against the manual position's representative
    hour; untimed automatic items always follow manual ones, and an exact
    hour tie keeps the manual item first.
    """
    a_manual = a.manual_position is not None
    b_manual = b.manual_position is not None

    if a_manual and b_manual:
        return _sign(a.manual_position - b.manual_position)
    if not a_manual and not b_manual:
        return _compare_automatic(a, b)

    auto, manual = (b, a) if a_manual else (a, b)
    if auto.due_time is None:
        auto_first = False
    else:
        auto_hour = auto.due_time // MS_PER_HOUR
        auto_first = auto_hour < position_hour(manual.manual_position)

    result = -1 if auto_first else 1
    return result if auto is a else -result


def compare_completed(a: Item, b: Item) -> int:
    """Most recently completed first; items without a completion instant last."""
    if a.completion_instant is None and b.completion_instant is None:
        return 0
    if a.completion_instant is None:
        return 1
    if b.completion_instant is None:
        return -1
    if a.completion_instant == b.completion_instant:
        return 0
    return -1 if a.completion_instant > b.completion_instant else 1


def sort_items(items: list[Item]) -> list[Item]:
    """Sort a day, soon or waiting bucket. Stable for equal items."""
    return sorted(items, key=cmp_to_key(compare_items))


def sort_completed(items: list[Item]) -> list[Item]:
    return sorted(items, key=cmp_to_key(compare_completed))
