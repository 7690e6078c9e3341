"""Engine error types."""


class EngineError(Exception):
    """Base class for errors raised by the engine."""

    pass


class InvalidTask(EngineError):
    """Raised when a task fails validation at the mutation boundary."""

    pass


class CompletionNotAllowed(EngineError):
    """Raised when a daily task is completed from a day other than today."""

    pass


class InvalidMove(EngineError):
    """Raised when a drag or move targets an illegal category or position."""

    pass


class TaskNotFound(EngineError):
    """Raised when a task id is not present in the store."""

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class InvalidTransition(EngineError):
    """Raised when a reminder is driven through a state change it cannot make."""

    pass
