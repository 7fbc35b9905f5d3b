"""
SQLModel table definitions for the task store.

These tables describe the minimum schema the store queries against. The store
itself never creates or alters tables; ``create_schema`` exists for bootstrap
scripts and tests.
"""

import time

from sqlalchemy import BigInteger, Engine, ForeignKey, Integer
from sqlmodel import Column, Field, SQLModel, Text


def epoch_now() -> int:
    """Current Unix time in whole seconds, the default for ``tasks.opened``."""
    return int(time.time())


class TaskRecord(SQLModel, table=True):
    __tablename__ = "tasks"
    # AUTOINCREMENT keeps SQLite from reusing ids of deleted rows
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    opened: int = Field(
        default_factory=epoch_now,
        sa_column=Column(BigInteger, nullable=False, default=epoch_now),
    )
    closed: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0, server_default="0"),
    )
    author_id: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0, server_default="0"),
    )
    assigned_id: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0, server_default="0"),
    )
    title: str = Field(default="", sa_column=Column(Text, nullable=False))
    content: str = Field(default="", sa_column=Column(Text, nullable=False))


class LabelRecord(SQLModel, table=True):
    __tablename__ = "labels"

    id: int | None = Field(default=None, primary_key=True)
    label: str = Field(sa_column=Column(Text, nullable=False, unique=True))


class TaskLabelRecord(SQLModel, table=True):
    __tablename__ = "task_labels"

    # Composite key: a task carries a given label at most once
    task_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True
        )
    )
    label_id: int = Field(
        sa_column=Column(
            Integer, ForeignKey("labels.id", ondelete="CASCADE"), primary_key=True
        )
    )


tasks_table = TaskRecord.__table__  # type: ignore[attr-defined]
labels_table = LabelRecord.__table__  # type: ignore[attr-defined]
task_labels_table = TaskLabelRecord.__table__  # type: ignore[attr-defined]

SCHEMA_TABLES = [tasks_table, labels_table, task_labels_table]


def create_schema(engine: Engine) -> None:
    """Create the task store tables if they do not exist."""
    SQLModel.metadata.create_all(engine, tables=SCHEMA_TABLES)


def drop_schema(engine: Engine) -> None:
    """Drop the task store tables."""
    SQLModel.metadata.drop_all(engine, tables=SCHEMA_TABLES)
