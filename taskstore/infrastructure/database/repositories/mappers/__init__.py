"""
Mappers for converting between result rows and domain entities.
"""

from .task_mapper import TASK_FIELDS, TaskMapper

__all__ = ["TaskMapper", "TASK_FIELDS"]
