"""Task management for Pomodorise.

Every function takes the caller's ``account_id`` and only ever sees that
account's tasks; a task owned by someone else is reported exactly like a
missing one.

Progress fields (``completed_intervals`` and the automatic status moves)
belong to :mod:`pomodorise.sessions.lifecycle`.  ``update_task`` can still
set ``status`` by hand, the way a user ticks a task off early.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time

from ..database.db import get_session
from ..database.models import Account, Task, TaskPriority, TaskStatus
from ..errors import AccountNotFound, TaskNotFound, ValidationFailed

logger = logging.getLogger(__name__)

MIN_ESTIMATED_INTERVALS = 1
MAX_ESTIMATED_INTERVALS = 20
MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

_UPDATABLE_FIELDS = frozenset({
    "title", "description", "status", "priority",
    "estimated_intervals", "due_date",
})


# ── validation helpers ────────────────────────────────────────────────────


def parse_estimated_intervals(value, field_name: str = "estimated_intervals") -> int:
    """Accept an int or a numeric string; it must be a whole number 1-20."""
    if isinstance(value, bool):
        raise ValidationFailed(f"{field_name} must be a number (got bool)")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise ValidationFailed(
                f"{field_name} must be a number (got {value!r})"
            ) from None
    if not isinstance(value, (int, float)):
        raise ValidationFailed(
            f"{field_name} must be a number (got {type(value).__name__})"
        )
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationFailed(f"{field_name} must be a whole number")
        value = int(value)
    if value < MIN_ESTIMATED_INTERVALS:
        raise ValidationFailed(
            f"{field_name} must be at least {MIN_ESTIMATED_INTERVALS} "
            f"(got {value})"
        )
    if value > MAX_ESTIMATED_INTERVALS:
        raise ValidationFailed(
            f"{field_name} can't exceed {MAX_ESTIMATED_INTERVALS} (got {value})"
        )
    return value


def _clean_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationFailed("title is required")
    title = title.strip()
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationFailed(
            f"title can't exceed {MAX_TITLE_LENGTH} characters"
        )
    return title


def _clean_description(description) -> str | None:
    if description is None:
        return None
    description = str(description).strip()
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise ValidationFailed(
            f"description can't exceed {MAX_DESCRIPTION_LENGTH} characters"
        )
    return description or None


def _clean_due_date(value, now: datetime | None = None) -> datetime | None:
    """A due date is optional, but when given it must lie in the future.

    A plain ``date`` means midnight at the start of that day.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        due = value
    elif isinstance(value, date):
        due = datetime.combine(value, time())
    else:
        raise ValidationFailed(
            f"due_date must be a date or datetime (got {type(value).__name__})"
        )
    if due <= (now or datetime.now()):
        raise ValidationFailed("due_date must be in the future")
    return due


def _enum_value(enum_cls, value, field_name: str) -> str:
    try:
        return enum_cls(value).value
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationFailed(
            f"{field_name} must be one of {allowed} (got {value!r})"
        ) from None


def _owned_task(db, task_id: int, account_id: int) -> Task:
    task = db.query(Task).filter_by(id=task_id, account_id=account_id).first()
    if task is None:
        raise TaskNotFound(f"Task {task_id} not found")
    return task


# ── CRUD ──────────────────────────────────────────────────────────────────


def create_task(
    account_id: int,
    title: str,
    estimated_intervals,
    *,
    description: str | None = None,
    priority: TaskPriority | str = TaskPriority.MEDIUM,
    due_date: datetime | None = None,
) -> Task:
    """Create a pending task with no completed intervals."""
    task = Task(
        account_id=account_id,
        title=_clean_title(title),
        description=_clean_description(description),
        priority=_enum_value(TaskPriority, priority, "priority"),
        estimated_intervals=parse_estimated_intervals(estimated_intervals),
        completed_intervals=0,
        status=TaskStatus.PENDING.value,
        due_date=_clean_due_date(due_date),
    )
    with get_session() as db:
        if db.get(Account, account_id) is None:
            raise AccountNotFound(f"Account {account_id} not found")
        db.add(task)
        db.flush()
    logger.info("Created task %d for account %d", task.id, account_id)
    return task


def list_tasks(
    account_id: int,
    *,
    status: TaskStatus | str | None = None,
    priority: TaskPriority | str | None = None,
) -> list[Task]:
    """The account's tasks, newest first, optionally filtered."""
    with get_session() as db:
        query = db.query(Task).filter(Task.account_id == account_id)
        if status is not None:
            query = query.filter(
                Task.status == _enum_value(TaskStatus, status, "status")
            )
        if priority is not None:
            query = query.filter(
                Task.priority == _enum_value(TaskPriority, priority, "priority")
            )
        return query.order_by(Task.created_at.desc(), Task.id.desc()).all()


def get_task(task_id: int, account_id: int) -> Task:
    with get_session() as db:
        return _owned_task(db, task_id, account_id)


def update_task(task_id: int, account_id: int, **changes) -> Task:
    """Apply *changes* to an owned task.

    Only ``title``, ``description``, ``status``, ``priority``,
    ``estimated_intervals`` and ``due_date`` may change.
    """
    unknown = set(changes) - _UPDATABLE_FIELDS
    if unknown:
        raise ValidationFailed(
            f"cannot update field(s): {', '.join(sorted(unknown))}"
        )

    cleaned: dict[str, object] = {}
    if "title" in changes:
        cleaned["title"] = _clean_title(changes["title"])
    if "description" in changes:
        cleaned["description"] = _clean_description(changes["description"])
    if "status" in changes:
        cleaned["status"] = _enum_value(TaskStatus, changes["status"], "status")
    if "priority" in changes:
        cleaned["priority"] = _enum_value(
            TaskPriority, changes["priority"], "priority",
        )
    if "estimated_intervals" in changes:
        cleaned["estimated_intervals"] = parse_estimated_intervals(
            changes["estimated_intervals"],
        )
    if "due_date" in changes:
        cleaned["due_date"] = _clean_due_date(changes["due_date"])

    with get_session() as db:
        task = _owned_task(db, task_id, account_id)
        for key, value in cleaned.items():
            setattr(task, key, value)
    return task


def delete_task(task_id: int, account_id: int) -> None:
    """Delete an owned task.  Sessions that linked to it are left alone."""
    with get_session() as db:
        task = _owned_task(db, task_id, account_id)
        db.delete(task)
    logger.info("Deleted task %d for account %d", task_id, account_id)
