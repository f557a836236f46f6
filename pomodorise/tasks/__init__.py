"""Tasks package."""

from .service import (
    create_task,
    list_tasks,
    get_task,
    update_task,
    delete_task,
    parse_estimated_intervals,
    MAX_ESTIMATED_INTERVALS,
)

__all__ = [
    "create_task",
    "list_tasks",
    "get_task",
    "update_task",
    "delete_task",
    "parse_estimated_intervals",
    "MAX_ESTIMATED_INTERVALS",
]
