"""In-memory task store adapter."""

from dataclasses import replace

from sevenday.core.errors import TaskNotFound
from sevenday.core.tasks import Task


class InMemoryTaskStore:
    """
    Dict-backed task storage.

    Implements TaskStore protocol. Hands out copies so callers cannot
    mutate stored tasks behind the store's back. Tasks inserted with
    id 0 get the next free id.
    """

    def __init__(self, tasks: list[Task] | None = None):
        self._tasks: dict[int, Task] = {}
        self._next_id = 1
        for task in tasks or []:
            self.insert(task)

    def get_all(self) -> list[Task]:
        return [replace(t) for t in self._tasks.values()]

    def get_by_id(self, task_id: int) -> Task | None:
        task = self._tasks.get(task_id)
        return replace(task) if task else None

    def insert(self, task: Task) -> Task:
        if not task.id:
            task = replace(task, id=self._next_id)
        self._next_id = max(self._next_id, task.id + 1)
        self._tasks[task.id] = replace(task)
        return replace(task)

    def update(self, task: Task) -> None:
        if task.id not in self._tasks:
            raise TaskNotFound(task.id)
        self._tasks[task.id] = replace(task)

    def delete(self, task: Task) -> None:
        self._tasks.pop(task.id, None)
