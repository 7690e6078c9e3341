"""Task store interface."""

from typing import Protocol

from sevenday.core.tasks import Task


class TaskStore(Protocol):
    """Interface for reading and writing tasks in any backend."""

    def get_all(self) -> list[Task]:
        """Snapshot of every stored task."""
        ...

    def get_by_id(self, task_id: int) -> Task | None:
        """Fetch one task. Returns None if not found."""
        ...

    def insert(self, task: Task) -> Task:
        """Store a new task. Returns it with its assigned id."""
        ...

    def update(self, task: Task) -> None:
        """Overwrite the stored task with the same id."""
        ...

    def delete(self, task: Task) -> None:
        """Remove a task."""
        ...
