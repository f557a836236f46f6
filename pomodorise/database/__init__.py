"""Database package."""

from .db import configure_engine, get_session, init_db
from .models import (
    Account,
    IntervalKind,
    IntervalSession,
    Task,
    TaskPriority,
    TaskStatus,
)

__all__ = [
    "configure_engine",
    "get_session",
    "init_db",
    "Account",
    "IntervalKind",
    "IntervalSession",
    "Task",
    "TaskPriority",
    "TaskStatus",
]
