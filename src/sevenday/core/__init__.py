"""Functional core - pure business logic with no I/O."""

from .calendar import DayLabel, UnknownLabel, Weekday, parse_day_label
from .tasks import RealItem, RecurrenceType, Task, VirtualInstance, validate_task
from .categorize import Bucket, Category, CategorizationResult, categorize, categorize_report
from .ordering import compare_completed, compare_items
from .reminders import NoReminder, ReminderState, next_trigger
from .mutations import (
    DragTransaction,
    begin_drag,
    end_drag,
    move_to_category,
    reorder,
    toggle_completion,
    unpin,
)
from .errors import (
    CompletionNotAllowed,
    EngineError,
    InvalidMove,
    InvalidTask,
    InvalidTransition,
    TaskNotFound,
)

__all__ = [
    # Calendar
    "DayLabel",
    "UnknownLabel",
    "Weekday",
    "parse_day_label",
    # Tasks
    "RealItem",
    "RecurrenceType",
    "Task",
    "VirtualInstance",
    "validate_task",
    # Categorization
    "Bucket",
    "Category",
    "CategorizationResult",
    "categorize",
    "categorize_report",
    "compare_completed",
    "compare_items",
    # Reminders
    "NoReminder",
    "ReminderState",
    "next_trigger",
    # Mutations
    "DragTransaction",
    "begin_drag",
    "end_drag",
    "move_to_category",
    "reorder",
    "toggle_completion",
    "unpin",
    # Errors
    "CompletionNotAllowed",
    "EngineError",
    "InvalidMove",
    "InvalidTask",
    "InvalidTransition",
    "TaskNotFound",
]
