"""Task entity, the single record type kept by the task store."""

from pydantic import BaseModel, Field


class Task(BaseModel):
    """
    A task as stored in the ``tasks`` relation.

    Zero is the "unset" value for every integer field: an ``id`` of 0 has not
    been assigned by the store yet, a ``closed`` of 0 means the task is still
    open and an ``author_id``/``assigned_id`` of 0 references no user.
    """

    id: int = Field(default=0, ge=0)
    opened: int = 0
    closed: int = 0
    author_id: int = 0
    assigned_id: int = 0
    title: str = ""
    content: str = ""

    @property
    def is_closed(self) -> bool:
        """Check if the task has a close timestamp."""
        return self.closed != 0

    @property
    def is_assigned(self) -> bool:
        return self.assigned_id != 0
