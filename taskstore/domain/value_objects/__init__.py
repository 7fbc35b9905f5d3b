from .task_filter import WILDCARD, TaskFilter

__all__ = ["TaskFilter", "WILDCARD"]
