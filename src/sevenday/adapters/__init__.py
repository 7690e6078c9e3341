"""Adapters - I/O implementations of ports."""

from .memory_store import InMemoryTaskStore
from .json_store import JsonTaskStore
from .scheduler_dispatcher import SchedulerDispatcher

__all__ = [
    "InMemoryTaskStore",
    "JsonTaskStore",
    "SchedulerDispatcher",
]
