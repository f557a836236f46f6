"""Interval session lifecycle for Pomodorise.

States
------
OPEN        Created by ``start_interval``.  Costs nothing: no points,
            no streak change, no task progress.
COMPLETED   Set exactly once by ``complete_interval``.  Terminal.

An open session that is never completed simply stays open.  There is no
cancel or expiry.

Completion
----------
``complete_interval`` is one unit of work with two halves:

1. **Guaranteed** (one transaction): claim the session with a conditional
   update on ``completed = false``, score it with the account's
   pre-update streak, then add the points, advance or reset the streak
   and recompute the level.
2. **Best-effort** (separate transaction): if the session is a work
   interval linked to a task, bump the task's completed-interval counter
   and move its status forward.  A failure here is logged and never
   undoes half 1.

The conditional claim means two overlapping retries of the same
completion can't both credit points: the loser sees zero rows updated
and gets :class:`AlreadyCompleted`.

Signals
-------
interval_started(data: dict)
    ``session_id``, ``account_id``, ``kind``, ``duration_minutes``,
    ``task_id``.
interval_completed(data: dict)
    ``session_id``, ``account_id``, ``points_earned``, ``level``,
    ``points``, ``streak``.
level_up(data: dict)
    ``account_id``, ``old_level``, ``new_level``.
task_progressed(data: dict)
    ``task_id``, ``old_status``, ``status``, ``completed_intervals``,
    ``estimated_intervals``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from PyQt6.QtCore import QObject, pyqtSignal
from sqlalchemy import update

from ..database.db import get_session
from ..database.models import (
    Account, IntervalKind, IntervalSession, Task, TaskStatus,
)
from ..errors import (
    AccountNotFound,
    AlreadyCompleted,
    SessionNotFound,
    TaskNotFound,
    ValidationFailed,
)
from ..gamification.scoring import (
    compute_interval_points,
    level_for_points,
    streak_continues,
)
from ..settings import Settings

logger = logging.getLogger(__name__)


# ── linked-task progress ──────────────────────────────────────────────────


def advance_task_progress(task: Task) -> str:
    """Count one more completed interval against *task*.

    ``pending → in_progress → completed``.  Status never moves backward;
    a completed task keeps counting past its estimate.
    """
    task.completed_intervals += 1
    if (
        task.completed_intervals >= task.estimated_intervals
        and task.status != TaskStatus.COMPLETED.value
    ):
        task.status = TaskStatus.COMPLETED.value
    elif task.status == TaskStatus.PENDING.value:
        task.status = TaskStatus.IN_PROGRESS.value
    return task.status


# ── manager ───────────────────────────────────────────────────────────────


class IntervalManager(QObject):
    """Starts and completes interval sessions and applies their rewards.

    The caller's ``account_id`` is trusted: authentication happens
    upstream.
    """

    interval_started = pyqtSignal(object)
    interval_completed = pyqtSignal(object)
    level_up = pyqtSignal(object)
    task_progressed = pyqtSignal(object)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(parent)
        settings = settings or Settings()
        self._min_duration: int = settings.min_duration_minutes
        self._max_duration: int = settings.max_duration_minutes

    # ── validation ───────────────────────────────────────────────────────

    def _validate_duration(self, duration_minutes) -> int:
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
            raise ValidationFailed(
                f"duration_minutes must be an integer "
                f"(got {type(duration_minutes).__name__})"
            )
        if not self._min_duration <= duration_minutes <= self._max_duration:
            raise ValidationFailed(
                f"duration_minutes must be between {self._min_duration} and "
                f"{self._max_duration} (got {duration_minutes})"
            )
        return duration_minutes

    @staticmethod
    def _validate_kind(kind: IntervalKind | str) -> IntervalKind:
        try:
            return IntervalKind(kind)
        except ValueError:
            allowed = ", ".join(k.value for k in IntervalKind)
            raise ValidationFailed(
                f"kind must be one of {allowed} (got {kind!r})"
            ) from None

    # ── start ────────────────────────────────────────────────────────────

    def start_interval(
        self,
        account_id: int,
        kind: IntervalKind | str,
        duration_minutes: int,
        task_id: int | None = None,
        *,
        now: datetime | None = None,
    ) -> IntervalSession:
        """Open a new interval session.  Touches no account or task."""
        kind = self._validate_kind(kind)
        duration_minutes = self._validate_duration(duration_minutes)
        if now is None:
            now = datetime.now()

        with get_session() as db:
            if db.get(Account, account_id) is None:
                raise AccountNotFound(f"Account {account_id} not found")

            if task_id is not None:
                task = (
                    db.query(Task)
                    .filter_by(id=task_id, account_id=account_id)
                    .first()
                )
                if task is None:
                    raise TaskNotFound(f"Task {task_id} not found")

            record = IntervalSession(
                account_id=account_id,
                task_id=task_id,
                duration_minutes=duration_minutes,
                kind=kind.value,
                completed=False,
                points_earned=0,
                started_at=now,
            )
            db.add(record)
            db.flush()

        logger.info(
            "Started %s interval %d (%d min) for account %d",
            kind.value, record.id, duration_minutes, account_id,
        )
        self.interval_started.emit({
            "session_id": record.id,
            "account_id": account_id,
            "kind": kind.value,
            "duration_minutes": duration_minutes,
            "task_id": task_id,
        })
        return record

    # ── preview ──────────────────────────────────────────────────────────

    def preview_points(self, session_id: int, account_id: int) -> int:
        """Points *session_id* would earn if it were completed right now."""
        with get_session() as db:
            session = self._load_owned_session(db, session_id, account_id)
            if session.completed:
                raise AlreadyCompleted(session_id)
            account = db.get(Account, account_id)
            if account is None:
                raise AccountNotFound(f"Account {account_id} not found")
            return compute_interval_points(
                session.duration_minutes, session.kind, account.streak,
            )

    # ── complete ─────────────────────────────────────────────────────────

    def complete_interval(
        self,
        session_id: int,
        account_id: int,
        *,
        now: datetime | None = None,
    ) -> dict:
        """Complete an open session and credit the account.

        Returns a dict with ``session``, ``points_earned``, ``account``
        (``level``, ``points``, ``streak``), ``level_up``, ``old_level``
        and ``task`` (the updated linked task, or ``None``).

        A *now* at or before the session start is taken as one microsecond
        after it, so ``completed_at`` always follows ``started_at``.
        """
        if now is None:
            now = datetime.now()

        with get_session() as db:
            session = self._load_owned_session(db, session_id, account_id)
            if session.completed:
                raise AlreadyCompleted(session_id)

            account = (
                db.query(Account)
                .filter_by(id=account_id)
                .with_for_update()
                .first()
            )
            if account is None:
                raise AccountNotFound(f"Account {account_id} not found")

            # A coarse or skewed clock can read at or before the start.
            if now <= session.started_at:
                now = session.started_at + timedelta(microseconds=1)

            # ── 1. score with the streak as it stands ────────────────
            points = compute_interval_points(
                session.duration_minutes, session.kind, account.streak,
            )

            # ── 2. previous completion, read before this one lands ───
            previous = self._last_completed(db, account_id, exclude=session.id)

            # ── 3. claim the session (conditional on still open) ─────
            claimed = db.execute(
                update(IntervalSession)
                .where(
                    IntervalSession.id == session.id,
                    IntervalSession.account_id == account_id,
                    IntervalSession.completed.is_(False),
                )
                .values(
                    completed=True,
                    completed_at=now,
                    points_earned=points,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            ).rowcount
            if claimed != 1:
                raise AlreadyCompleted(session_id)
            db.refresh(session)

            # ── 4. account points / streak / level ───────────────────
            old_level = account.level
            account.points += points
            if previous is not None and streak_continues(previous.completed_at, now):
                account.streak += 1
                logger.debug(
                    "Streak continues for account %d: %d",
                    account_id, account.streak,
                )
            else:
                account.streak = 1
                logger.debug("Streak (re)started for account %d", account_id)
            account.level = level_for_points(account.points)

            summary = {
                "level": account.level,
                "points": account.points,
                "streak": account.streak,
            }

        leveled_up = summary["level"] > old_level
        logger.info(
            "Completed interval %d for account %d: +%d points "
            "(level %d, streak %d)",
            session_id, account_id, points, summary["level"], summary["streak"],
        )

        # ── 5. linked task (work intervals only, best-effort) ────────
        task = None
        if (
            session.task_id is not None
            and session.kind == IntervalKind.WORK.value
        ):
            task = self._update_linked_task(session.task_id, account_id, session_id)

        self.interval_completed.emit({
            "session_id": session_id,
            "account_id": account_id,
            "points_earned": points,
            **summary,
        })
        if leveled_up:
            logger.info(
                "Account %d reached level %d", account_id, summary["level"],
            )
            self.level_up.emit({
                "account_id": account_id,
                "old_level": old_level,
                "new_level": summary["level"],
            })

        return {
            "session": session,
            "points_earned": points,
            "account": summary,
            "level_up": leveled_up,
            "old_level": old_level,
            "task": task,
        }

    # ── internals ────────────────────────────────────────────────────────

    @staticmethod
    def _load_owned_session(db, session_id: int, account_id: int) -> IntervalSession:
        session = (
            db.query(IntervalSession)
            .filter_by(id=session_id, account_id=account_id)
            .first()
        )
        if session is None:
            raise SessionNotFound(f"Session {session_id} not found")
        return session

    @staticmethod
    def _last_completed(db, account_id: int, *, exclude: int) -> IntervalSession | None:
        return (
            db.query(IntervalSession)
            .filter(
                IntervalSession.account_id == account_id,
                IntervalSession.completed.is_(True),
                IntervalSession.completed_at.is_not(None),
                IntervalSession.id != exclude,
            )
            .order_by(IntervalSession.completed_at.desc())
            .first()
        )

    def _update_linked_task(
        self, task_id: int, account_id: int, session_id: int,
    ) -> Task | None:
        try:
            with get_session() as db:
                task = (
                    db.query(Task)
                    .filter_by(id=task_id, account_id=account_id)
                    .with_for_update()
                    .first()
                )
                if task is None:
                    logger.debug(
                        "Task %d for session %d no longer exists",
                        task_id, session_id,
                    )
                    return None
                old_status = task.status
                advance_task_progress(task)
        except Exception:
            logger.warning(
                "Could not record progress on task %d for session %d",
                task_id, session_id, exc_info=True,
            )
            return None

        self.task_progressed.emit({
            "task_id": task.id,
            "old_status": old_status,
            "status": task.status,
            "completed_intervals": task.completed_intervals,
            "estimated_intervals": task.estimated_intervals,
        })
        return task
