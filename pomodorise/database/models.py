"""SQLAlchemy ORM models for Pomodorise."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey,
    CheckConstraint, Index,
)
from sqlalchemy.orm import DeclarativeBase


# ── enums ─────────────────────────────────────────────────────────────────


class IntervalKind(Enum):
    WORK = "work"
    BREAK = "break"
    LONG_BREAK = "long_break"


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class TaskPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# ── models ────────────────────────────────────────────────────────────────


class Base(DeclarativeBase):
    pass


class Account(Base):
    """A registered user and their gamification progress.

    ``level`` is always ``level_for_points(points)``; it is stored only so
    reads don't have to recompute it.
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_accounts_points"),
        CheckConstraint("level >= 1", name="ck_accounts_level"),
        CheckConstraint("streak >= 0", name="ck_accounts_streak"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(50), nullable=True)
    points = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    streak = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.now, onupdate=datetime.now,
    )

    def __repr__(self) -> str:
        return (
            f"<Account id={self.id} level={self.level} "
            f"points={self.points} streak={self.streak}>"
        )


class Task(Base):
    """A to-do item whose progress is counted in completed work intervals."""

    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "estimated_intervals >= 1", name="ck_tasks_estimated_intervals",
        ),
        CheckConstraint(
            "completed_intervals >= 0", name="ck_tasks_completed_intervals",
        ),
        Index("ix_tasks_account_status", "account_id", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        Integer, ForeignKey("accounts.id"), nullable=False, index=True,
    )
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default=TaskStatus.PENDING.value)
    priority = Column(
        String(10), nullable=False, default=TaskPriority.MEDIUM.value,
    )
    estimated_intervals = Column(Integer, nullable=False)
    completed_intervals = Column(Integer, nullable=False, default=0)
    due_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.now, onupdate=datetime.now,
    )

    @property
    def progress_percent(self) -> int:
        """Completed intervals as a percentage of the estimate (may pass 100)."""
        if not self.estimated_intervals:
            return 0
        return round(self.completed_intervals / self.estimated_intervals * 100)

    def __repr__(self) -> str:
        return (
            f"<Task id={self.id} status={self.status} "
            f"{self.completed_intervals}/{self.estimated_intervals}>"
        )


class IntervalSession(Base):
    """One focus or break interval (work | break | long_break)."""

    __tablename__ = "sessions"
    __table_args__ = (
        CheckConstraint(
            "duration_minutes >= 1", name="ck_sessions_duration_minutes",
        ),
        CheckConstraint("points_earned >= 0", name="ck_sessions_points_earned"),
        Index("ix_sessions_account_completed", "account_id", "completed"),
        Index("ix_sessions_account_started", "account_id", "started_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    # No FK: a task may be deleted while a linked session is still open.
    task_id = Column(Integer, nullable=True)
    duration_minutes = Column(Integer, nullable=False)
    kind = Column(String(20), nullable=False, default=IntervalKind.WORK.value)
    completed = Column(Boolean, nullable=False, default=False)
    points_earned = Column(Integer, nullable=False, default=0)
    started_at = Column(DateTime, nullable=False, default=datetime.now)
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(
        DateTime, nullable=False, default=datetime.now, onupdate=datetime.now,
    )

    @property
    def actual_duration_minutes(self) -> int | None:
        """Wall-clock minutes between start and completion."""
        if self.completed_at is None:
            return None
        elapsed = self.completed_at - self.started_at
        return round(elapsed.total_seconds() / 60)

    def __repr__(self) -> str:
        return (
            f"<IntervalSession id={self.id} kind={self.kind} "
            f"completed={self.completed}>"
        )
