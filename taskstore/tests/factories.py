"""
Test Data Factories

Factory helpers for creating tasks and label associations in test databases.
"""

import random

from sqlalchemy import bindparam, insert, select

from taskstore.domain.entities.task import Task
from taskstore.infrastructure.database.connection_pool import DatabaseConnectionPool
from taskstore.infrastructure.database.repositories.task_store import TaskStore
from taskstore.infrastructure.database.schema import labels_table, task_labels_table


class TaskFactory:
    """Factory for creating Task test instances."""

    @staticmethod
    def create(
        title: str | None = None,
        content: str | None = None,
        opened: int = 1_700_000_000,
        closed: int = 0,
        author_id: int = 0,
        assigned_id: int = 0,
    ) -> Task:
        """Create an unsaved Task with optional parameters."""
        if title is None:
            title = f"Task {random.randint(1000, 9999)}"
        if content is None:
            content = random.choice(
                ["Fix the build", "Write release notes", "Review the schema"]
            )

        return Task(
            opened=opened,
            closed=closed,
            author_id=author_id,
            assigned_id=assigned_id,
            title=title,
            content=content,
        )

    @staticmethod
    def persist(store: TaskStore, **fields) -> Task:
        """
        Save a task with all fields populated.

        Creation only consumes title and content, so the remaining fields are
        written with a follow-up full update.
        """
        task = TaskFactory.create(**fields)
        task_id = store.new_task(task)
        store.update_task(task_id, task)
        return task.model_copy(update={"id": task_id})


def attach_label(pool: DatabaseConnectionPool, task_id: int, label: str) -> None:
    """Associate ``task_id`` with ``label``, creating the label if needed."""
    with pool.connection() as conn:
        label_id = conn.execute(
            select(labels_table.c.id).where(labels_table.c.label == bindparam("label")),
            {"label": label},
        ).scalar_one_or_none()
        if label_id is None:
            label_id = conn.execute(
                insert(labels_table).returning(labels_table.c.id), {"label": label}
            ).scalar_one()
        conn.execute(
            insert(task_labels_table), {"task_id": task_id, "label_id": label_id}
        )
