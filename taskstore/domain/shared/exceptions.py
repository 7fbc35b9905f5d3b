"""
Task store exceptions with type discrimination.

Every store operation either returns a valid result or raises exactly one of
the exceptions below. Callers branch on the exception class (or on
``error_type``) instead of matching error text.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    CONNECTION = "connection"
    QUERY = "query"
    NOT_FOUND = "not_found"
    MAPPING = "mapping"


class TaskStoreError(Exception):
    """Base class for all task store errors."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class DatabaseConnectionError(TaskStoreError, ConnectionError):
    """Raised when the pool cannot be established or a connection acquired."""

    def __init__(
        self, message: str, details: dict[str, str | int | bool | None] | None = None
    ) -> None:
        super().__init__(message, ErrorType.CONNECTION, details)


class QueryError(TaskStoreError):
    """Raised when the store rejects a statement or the round trip fails."""

    def __init__(
        self,
        message: str,
        operation: str,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        query_details = details or {}
        query_details["operation"] = operation
        super().__init__(message, ErrorType.QUERY, query_details)
        self.operation = operation


class NotFoundError(TaskStoreError):
    """Raised when a single-row fetch matched zero rows."""

    def __init__(self, task_id: int) -> None:
        details = {"task_id": task_id, "entity_type": "task"}
        super().__init__(f"Task not found: {task_id}", ErrorType.NOT_FOUND, details)
        self.task_id = task_id


class MappingError(TaskStoreError):
    """Raised when a returned row cannot be decoded into a Task."""

    def __init__(
        self, message: str, details: dict[str, str | int | bool | None] | None = None
    ) -> None:
        super().__init__(message, ErrorType.MAPPING, details)
