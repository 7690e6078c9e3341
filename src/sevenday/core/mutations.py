"""User-driven task mutations - no I/O dependencies.

Each handler returns updated Task copies; persisting them is the caller's
job. Virtual instances are resolved to their source task before any
change is made, so nothing virtual is ever returned for storage.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from .calendar import DayLabel, Weekday
from .categorize import Bucket, Category
from .errors import CompletionNotAllowed, InvalidMove
from .recurrence import can_complete_on_offset
from .tasks import Item, Task, validate_task


def toggle_completion(task: Task, now: datetime | None = None, day_offset: int = 0) -> Task:
    """
    Flip completion, stamping or clearing the completion instant.

    day_offset is the instance the user acted on; daily tasks can only be
    completed from today's instance.
    """
    if not can_complete_on_offset(task, day_offset):
        raise CompletionNotAllowed(
            f"Daily task {task.description!r} can only be completed on today's instance"
        )
    if task.is_completed:
        return replace(task, is_completed=False, completion_instant=None)
    return replace(task, is_completed=True, completion_instant=now or datetime.now())


def toggle_item_completion(item: Item, now: datetime | None = None) -> Task:
    """Toggle completion from a bucket item, real or virtual."""
    day_offset = item.day_offset if item.is_virtual else 0
    return toggle_completion(item.task, now, day_offset)


def unpin(task: Task) -> Task:
    """Return a task to time-based ordering."""
    return replace(task, manual_position=None)


def edit_task(task: Task, **changes) -> Task:
    """Apply field edits and re-validate. The id cannot change."""
    if "id" in changes and changes["id"] != task.id:
        raise InvalidMove("Task id is immutable")
    return validate_task(replace(task, **changes))


def _label_for_target(target: Weekday | Bucket | DayLabel) -> DayLabel:
    if isinstance(target, DayLabel):
        return target
    if isinstance(target, Weekday):
        return DayLabel.for_weekday(target)
    match target:
        case Bucket.SOON:
            return DayLabel.SOON
        case Bucket.WAITING:
            return DayLabel.NONE
        case Bucket.OVERDUE:
            return DayLabel.IMMEDIATE
    raise InvalidMove(f"Tasks cannot be moved into {target.label}")


def move_to_category(task: Task, target: Weekday | Bucket | DayLabel) -> Task:
    """
    Rebind a task to the bucket it was dragged into.

    The due date is dropped so it cannot override the new binding, and
    any pin is dropped since it belonged to the previous bucket.
    """
    if task.is_daily:
        raise InvalidMove(f"Daily task {task.description!r} already appears on every day")
    label = _label_for_target(target)
    return replace(task, day_of_week=label, due_date=None, manual_position=None)


@dataclass
class DragTransaction:
    """
    An in-progress reorder within one bucket.

    Created by begin_drag, updated by move, consumed once by end_drag.
    """

    label: Weekday | Bucket
    dragged_id: int
    order: list[Item]
    moved: bool = False
    closed: bool = field(default=False, repr=False)

    def index_of(self, task_id: int) -> int:
        for i, item in enumerate(self.order):
            if item.id == task_id:
                return i
        raise InvalidMove(f"Task {task_id} is not in {self.label.label}")

    def move(self, to_position: int) -> None:
        """Move the dragged item to a position within the same bucket."""
        if self.closed:
            raise InvalidMove("Drag has already ended")
        if not 0 <= to_position < len(self.order):
            raise InvalidMove(
                f"Position {to_position} is outside {self.label.label} (0-{len(self.order) - 1})"
            )
        from_position = self.index_of(self.dragged_id)
        if from_position == to_position:
            return
        item = self.order.pop(from_position)
        self.order.insert(to_position, item)
        self.moved = True


def begin_drag(category: Category, task_id: int) -> DragTransaction:
    """Start dragging a task within its bucket."""
    if category.label is Bucket.COMPLETED:
        raise InvalidMove("Completed tasks are ordered by completion time")
    txn = DragTransaction(label=category.label, dragged_id=task_id, order=list(category.items))
    txn.index_of(task_id)
    return txn


def end_drag(txn: DragTransaction) -> list[Task]:
    """
    Finish a drag and return the tasks whose manual position changed.

    The dragged task and tasks already pinned take their new index;
    automatic tasks stay automatic. A drag with no move changes nothing.
    """
    if txn.closed:
        raise InvalidMove("Drag has already ended")
    txn.closed = True
    if not txn.moved:
        return []

    updated = []
    for index, item in enumerate(txn.order):
        task = item.task
        if item.id != txn.dragged_id and task.manual_position is None:
            continue
        if task.manual_position != index:
            updated.append(replace(task, manual_position=index))
    return updated


def reorder(category: Category, task_id: int, position: int) -> list[Task]:
    """Single-step drag: move a task to a position and return the changes."""
    txn = begin_drag(category, task_id)
    txn.move(position)
    return end_drag(txn)
