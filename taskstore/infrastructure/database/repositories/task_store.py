"""
Task store implementation providing CRUD and lookup operations for tasks.

Every operation is one parameterized statement executed on one pooled
connection: acquire, execute, release. Statements are built once at import
time, so each operation has a single static query shape whatever the caller
passes in.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from sqlalchemy import (
    CursorResult,
    Executable,
    Integer,
    Text,
    and_,
    bindparam,
    delete,
    insert,
    or_,
    select,
    update,
)
from sqlalchemy.exc import SQLAlchemyError

from taskstore.core.config import Settings, get_settings
from taskstore.domain.entities.task import Task
from taskstore.domain.shared.exceptions import (
    DatabaseConnectionError,
    NotFoundError,
    QueryError,
)
from taskstore.domain.value_objects.task_filter import WILDCARD, TaskFilter

from ..connection_pool import DatabaseConnectionPool
from ..schema import labels_table, task_labels_table, tasks_table
from .mappers import TaskMapper

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Column order must match TASK_FIELDS in the mapper
TASK_COLUMNS = (
    tasks_table.c.id,
    tasks_table.c.opened,
    tasks_table.c.closed,
    tasks_table.c.author_id,
    tasks_table.c.assigned_id,
    tasks_table.c.title,
    tasks_table.c.content,
)

_task_id = bindparam("task_id", type_=Integer)
_author_id = bindparam("author_id", type_=Integer)

SELECT_TASKS = (
    select(*TASK_COLUMNS)
    .where(
        and_(
            or_(_task_id == WILDCARD, tasks_table.c.id == _task_id),
            or_(_author_id == WILDCARD, tasks_table.c.author_id == _author_id),
        )
    )
    .order_by(tasks_table.c.id)
)

SELECT_TASKS_BY_AUTHOR = (
    select(*TASK_COLUMNS)
    .where(tasks_table.c.author_id == _author_id)
    .order_by(tasks_table.c.id)
)

SELECT_TASKS_BY_LABEL = (
    select(*TASK_COLUMNS)
    .select_from(
        tasks_table.join(
            task_labels_table, tasks_table.c.id == task_labels_table.c.task_id
        ).join(labels_table, task_labels_table.c.label_id == labels_table.c.id)
    )
    .where(labels_table.c.label == bindparam("label", type_=Text))
    .order_by(tasks_table.c.id)
)

SELECT_TASK_BY_ID = select(*TASK_COLUMNS).where(tasks_table.c.id == _task_id)

INSERT_TASK = (
    insert(tasks_table)
    .values(
        title=bindparam("task_title", type_=Text),
        content=bindparam("task_content", type_=Text),
    )
    .returning(tasks_table.c.id)
)

UPDATE_TASK = (
    update(tasks_table)
    .where(tasks_table.c.id == _task_id)
    .values(
        opened=bindparam("task_opened"),
        closed=bindparam("task_closed"),
        author_id=bindparam("task_author_id"),
        assigned_id=bindparam("task_assigned_id"),
        title=bindparam("task_title"),
        content=bindparam("task_content"),
    )
)

DELETE_TASK = delete(tasks_table).where(tasks_table.c.id == _task_id)


class TaskStore:
    """
    Data access for tasks over a pooled relational store.

    The store holds no task state between calls. It is safe to share one
    instance between concurrent callers; the pool is the only shared resource.
    """

    def __init__(self, pool: DatabaseConnectionPool):
        """
        Initialize the store with an established connection pool.

        Args:
            pool: Connection pool the store executes every operation on
        """
        self.pool = pool

    @classmethod
    def from_url(cls, database_url: str, **pool_options: Any) -> "TaskStore":
        """
        Establish a connection pool and return a store bound to it.

        The store is probed with one round trip before it is returned.

        Raises:
            DatabaseConnectionError: If the URL is malformed or the store is unreachable
        """
        pool = DatabaseConnectionPool(database_url, **pool_options)
        try:
            pool.probe()
        except DatabaseConnectionError:
            pool.dispose()
            raise
        logger.info(f"TaskStore ready db={pool.masked_url}")
        return cls(pool)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "TaskStore":
        settings = settings or get_settings()
        return cls.from_url(settings.SQLALCHEMY_DATABASE_URI, **settings.pool_options)

    def close(self) -> None:
        """Dispose of the underlying pool."""
        self.pool.dispose()

    def __enter__(self) -> "TaskStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _execute(
        self,
        operation: str,
        statement: Executable,
        params: Mapping[str, Any],
        consume: Callable[[CursorResult[Any]], T],
    ) -> T:
        """
        Run one statement on one pooled connection and consume its result.

        Raises:
            DatabaseConnectionError: If no connection could be acquired
            QueryError: If the store rejected the statement, a parameter could not
                be bound or the round trip failed
        """
        try:
            with self.pool.connection() as conn:
                return consume(conn.execute(statement, params))
        except (SQLAlchemyError, OverflowError) as e:
            logger.error(f"Task store operation {operation} failed: {e}")
            raise QueryError(
                f"Error during {operation}: {e}",
                operation,
                {"error_type": type(e).__name__},
            ) from e

    def tasks(
        self, task_id: int | None = WILDCARD, author_id: int | None = WILDCARD
    ) -> list[Task]:
        """
        List tasks, optionally narrowed by task id and author id.

        Args:
            task_id: Task id to match, 0 or None for any
            author_id: Author id to match, 0 or None for any

        Returns:
            Matching tasks ordered by id, empty if none match

        Raises:
            QueryError: If the store operation fails
            MappingError: If a row cannot be decoded
        """
        task_filter = TaskFilter.from_ids(task_id, author_id)
        logger.debug(f"Listing tasks filter={task_filter}")
        rows = self._execute(
            "tasks", SELECT_TASKS, task_filter.bind_params(), lambda result: result.all()
        )
        return TaskMapper.rows_to_tasks(rows)

    def new_task(self, task: Task) -> int:
        """
        Create a task from its title and content.

        Every other field is assigned by the store: the id by auto-generation,
        ``opened`` by the current time and the rest by schema defaults.

        Returns:
            Id of the created task

        Raises:
            QueryError: If the store operation fails
        """
        task_id = self._execute(
            "new_task",
            INSERT_TASK,
            TaskMapper.task_to_insert_params(task),
            lambda result: result.scalar_one(),
        )
        logger.debug(f"Created task {task_id}")
        return task_id

    def tasks_by_author(self, author_id: int) -> list[Task]:
        """
        List tasks created by an author.

        Unlike ``tasks``, an ``author_id`` of 0 is matched literally.

        Raises:
            QueryError: If the store operation fails
            MappingError: If a row cannot be decoded
        """
        rows = self._execute(
            "tasks_by_author",
            SELECT_TASKS_BY_AUTHOR,
            {"author_id": author_id},
            lambda result: result.all(),
        )
        return TaskMapper.rows_to_tasks(rows)

    def tasks_by_label(self, label: str) -> list[Task]:
        """
        List tasks carrying the label with exactly this name.

        Raises:
            QueryError: If the store operation fails
            MappingError: If a row cannot be decoded
        """
        rows = self._execute(
            "tasks_by_label",
            SELECT_TASKS_BY_LABEL,
            {"label": label},
            lambda result: result.all(),
        )
        return TaskMapper.rows_to_tasks(rows)

    def get_task_by_id(self, task_id: int) -> Task:
        """
        Fetch one task.

        Raises:
            NotFoundError: If no task has this id
            QueryError: If the store operation fails
            MappingError: If the row cannot be decoded
        """
        row = self._execute(
            "get_task_by_id",
            SELECT_TASK_BY_ID,
            {"task_id": task_id},
            lambda result: result.one_or_none(),
        )
        if row is None:
            raise NotFoundError(task_id)
        return TaskMapper.row_to_task(row)

    def update_task(self, task_id: int, task: Task) -> int:
        """
        Overwrite every mutable field of a task.

        This is not a merge: fields left at their defaults in ``task`` are
        written as such. Updating an id that does not exist is not an error.

        Returns:
            Number of rows updated (0 or 1)

        Raises:
            QueryError: If the store operation fails
        """
        updated = self._execute(
            "update_task",
            UPDATE_TASK,
            TaskMapper.task_to_update_params(task_id, task),
            lambda result: result.rowcount,
        )
        if not updated:
            logger.debug(f"Update matched no task with id {task_id}")
        return updated

    def delete_task_by_id(self, task_id: int) -> int:
        """
        Delete a task if it exists. Deleting a missing id is not an error.

        Returns:
            Number of rows deleted (0 or 1)

        Raises:
            QueryError: If the store operation fails
        """
        deleted = self._execute(
            "delete_task_by_id",
            DELETE_TASK,
            {"task_id": task_id},
            lambda result: result.rowcount,
        )
        logger.debug(f"Deleted task {task_id} rows={deleted}")
        return deleted
