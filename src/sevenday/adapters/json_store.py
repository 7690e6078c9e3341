"""File-based task storage adapter."""

import json
import logging
from dataclasses import replace
from pathlib import Path

from sevenday.core.errors import TaskNotFound
from sevenday.core.tasks import Task

logger = logging.getLogger(__name__)


class JsonTaskStore:
    """
    JSON file task storage.

    Implements TaskStore protocol. The whole task list lives in one file
    as {"nextId": n, "tasks": [...]} and is re-read on every call, so
    edits made by other processes are picked up on the next read. A bare
    JSON array of tasks is also accepted. nextId only ever grows, so the
    id of a deleted task is never handed out again.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> tuple[list[Task], int]:
        if not self.path.exists():
            return [], 1
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Task file {self.path} is not valid JSON: {e}")

        if isinstance(data, list):
            records, next_id = data, 1
        else:
            records, next_id = data.get("tasks", []), data.get("nextId", 1) or 1
        tasks = [Task.from_dict(item) for item in records]
        next_id = max(next_id, max((t.id for t in tasks), default=0) + 1)
        return tasks, next_id

    def _write(self, tasks: list[Task], next_id: int) -> None:
        data = {"nextId": next_id, "tasks": [t.to_dict() for t in tasks]}
        self.path.write_text(json.dumps(data, indent=2))

    def get_all(self) -> list[Task]:
        return self._read()[0]

    def get_by_id(self, task_id: int) -> Task | None:
        return next((t for t in self.get_all() if t.id == task_id), None)

    def insert(self, task: Task) -> Task:
        tasks, next_id = self._read()
        if not task.id:
            task = replace(task, id=next_id)
        tasks.append(task)
        self._write(tasks, max(next_id, task.id + 1))
        logger.debug(f"Inserted task {task.id} into {self.path}")
        return task

    def update(self, task: Task) -> None:
        tasks, next_id = self._read()
        for i, existing in enumerate(tasks):
            if existing.id == task.id:
                tasks[i] = task
                self._write(tasks, next_id)
                return
        raise TaskNotFound(task.id)

    def delete(self, task: Task) -> None:
        tasks, next_id = self._read()
        remaining = [t for t in tasks if t.id != task.id]
        if len(remaining) != len(tasks):
            self._write(remaining, next_id)
