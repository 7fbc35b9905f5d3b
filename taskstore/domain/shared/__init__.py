from .exceptions import (
    DatabaseConnectionError,
    ErrorType,
    MappingError,
    NotFoundError,
    QueryError,
    TaskStoreError,
)

__all__ = [
    "ErrorType",
    "TaskStoreError",
    "DatabaseConnectionError",
    "QueryError",
    "NotFoundError",
    "MappingError",
]
