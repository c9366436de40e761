class TaskNotFoundError(Exception):
    """Raised when a task identifier does not exist in the selected backend."""

    def __init__(self, task_id: int | str) -> None:
        super().__init__(f"Task with id '{task_id}' was not found.")
        self.task_id = task_id


class TaskValidationError(Exception):
    """Raised when client input is rejected before any backend call."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BackendError(Exception):
    """Raised when a repository call fails (lost connectivity, timeout, bad SQL)."""

    def __init__(self, action: str, cause: BaseException) -> None:
        super().__init__(f"Failed to {action}: {cause}")
        self.action = action
        self.cause = cause

    @property
    def error(self) -> str:
        return f"Failed to {self.action}"

    @property
    def diagnostic(self) -> str:
        return str(self.cause)
