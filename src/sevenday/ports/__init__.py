"""Ports - interfaces/protocols for external dependencies."""

from .task_store import TaskStore
from .trigger_dispatcher import TriggerDispatcher

__all__ = [
    "TaskStore",
    "TriggerDispatcher",
]
