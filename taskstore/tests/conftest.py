"""
Test configuration and fixtures.

Every test gets its own in-memory SQLite database behind a
DatabaseConnectionPool, with the task store schema created fresh.
"""

from collections.abc import Callable, Generator

import pytest

from taskstore.domain.entities.task import Task
from taskstore.infrastructure.database.connection_pool import DatabaseConnectionPool
from taskstore.infrastructure.database.repositories.task_store import TaskStore
from taskstore.infrastructure.database.schema import create_schema, drop_schema
from taskstore.tests.factories import TaskFactory, attach_label


@pytest.fixture(scope="function")
def pool() -> Generator[DatabaseConnectionPool, None, None]:
    """Provide a pool over a fresh in-memory database with the schema created."""
    pool = DatabaseConnectionPool("sqlite://", log_slow_queries=False)
    create_schema(pool.engine)

    yield pool

    drop_schema(pool.engine)
    pool.dispose()


@pytest.fixture(scope="function")
def store(pool: DatabaseConnectionPool) -> TaskStore:
    return TaskStore(pool)


@pytest.fixture
def make_task(store: TaskStore) -> Callable[..., Task]:
    """Persist a task with every field set and return it as stored."""

    def _make_task(**fields) -> Task:
        return TaskFactory.persist(store, **fields)

    return _make_task


@pytest.fixture
def label_task(pool: DatabaseConnectionPool) -> Callable[[int, str], None]:
    """Associate a task with a label, creating the label on first use."""

    def _label_task(task_id: int, label: str) -> None:
        attach_label(pool, task_id, label)

    return _label_task
