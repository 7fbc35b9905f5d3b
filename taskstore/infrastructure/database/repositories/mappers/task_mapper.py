"""
Mapper for converting between result rows and Task domain entities.

All four read operations decode rows through ``TaskMapper.row_to_task``, so
the seven-column layout lives in one place: ``TASK_FIELDS`` here and the
matching column tuple the store selects.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import ValidationError

from taskstore.domain.entities.task import Task
from taskstore.domain.shared.exceptions import MappingError

TASK_FIELDS = (
    "id",
    "opened",
    "closed",
    "author_id",
    "assigned_id",
    "title",
    "content",
)


class TaskMapper:
    """
    Mapper class for converting between rows and Task entities.

    Rows are decoded strictly: a column holding a value of the wrong type is a
    schema mismatch, not something to coerce.
    """

    @staticmethod
    def row_to_task(row: Sequence[Any]) -> Task:
        """
        Decode one row of seven columns into a Task.

        Args:
            row: Anything yielding the row's columns in TASK_FIELDS order

        Returns:
            Task entity

        Raises:
            MappingError: If the row has the wrong shape or a column has the wrong type
        """
        values = tuple(row)
        if len(values) != len(TASK_FIELDS):
            raise MappingError(
                f"Expected {len(TASK_FIELDS)} columns, got {len(values)}",
                {"column_count": len(values)},
            )

        try:
            return Task.model_validate(dict(zip(TASK_FIELDS, values)), strict=True)
        except ValidationError as e:
            fields = ", ".join(
                str(error["loc"][0]) if error["loc"] else "task" for error in e.errors()
            )
            raise MappingError(
                f"Cannot decode task row, invalid field(s): {fields}",
                {"fields": fields, "error_count": e.error_count()},
            ) from e

    @staticmethod
    def rows_to_tasks(rows: Iterable[Sequence[Any]]) -> list[Task]:
        """Decode every row, preserving the order the store returned them in."""
        return [TaskMapper.row_to_task(row) for row in rows]

    @staticmethod
    def task_to_insert_params(task: Task) -> dict[str, str]:
        """Parameters for creating a task; only title and content are consumed."""
        return {"task_title": task.title, "task_content": task.content}

    @staticmethod
    def task_to_update_params(task_id: int, task: Task) -> dict[str, Any]:
        """Parameters for a full overwrite. The id carried by ``task`` is ignored."""
        return {
            "task_id": task_id,
            "task_opened": task.opened,
            "task_closed": task.closed,
            "task_author_id": task.author_id,
            "task_assigned_id": task.assigned_id,
            "task_title": task.title,
            "task_content": task.content,
        }
