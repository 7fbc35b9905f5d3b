"""
Filter value object for the filtered task listing.

Callers speak the store's wire convention where ``0`` means "any". Inside the
package the filter is held as a tagged optional (``None`` = no constraint) and
compiled back to ``0`` only when bound into the statement, whose predicates
have the shape ``(:param = 0 OR column = :param)``.
"""

from dataclasses import dataclass

WILDCARD = 0


def _as_optional(value: int | None) -> int | None:
    if value is None or value == WILDCARD:
        return None
    return value


@dataclass(frozen=True)
class TaskFilter:
    """Optional constraints on task id and author id."""

    task_id: int | None = None
    author_id: int | None = None

    @classmethod
    def from_ids(cls, task_id: int | None = 0, author_id: int | None = 0) -> "TaskFilter":
        """Build a filter from wire-level ids, treating 0 and None as wildcards."""
        return cls(task_id=_as_optional(task_id), author_id=_as_optional(author_id))

    @property
    def is_unfiltered(self) -> bool:
        return self.task_id is None and self.author_id is None

    def bind_params(self) -> dict[str, int]:
        """Compile the filter into statement parameters."""
        return {
            "task_id": WILDCARD if self.task_id is None else self.task_id,
            "author_id": WILDCARD if self.author_id is None else self.author_id,
        }
