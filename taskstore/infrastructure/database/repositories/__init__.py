"""
Repository implementations.

Contains the concrete data access components. They translate between domain
objects and database rows and execute each operation as one parameterized
statement against the shared connection pool.
"""

from .task_store import TaskStore

__all__ = ["TaskStore"]
