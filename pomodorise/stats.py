"""Session history and aggregate statistics for an account."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from sqlalchemy import func

from .database.db import get_session
from .database.models import IntervalKind, IntervalSession


@dataclass
class SessionStats:
    """Totals over an account's completed sessions."""

    total_sessions: int = 0
    total_minutes: int = 0
    completed_intervals: int = 0          # work sessions only
    average_session_duration: int = 0     # minutes, rounded
    points_earned: int = 0
    # [{"date": "YYYY-MM-DD", "count": n}, ...] oldest first
    sessions_per_day: list[dict] = field(default_factory=list)
    # {"work": {"count": n, "points": p, "minutes": m}, ...}
    by_kind: dict[str, dict[str, int]] = field(default_factory=dict)


def list_sessions(
    account_id: int,
    *,
    completed: bool | None = None,
    limit: int = 50,
) -> list[IntervalSession]:
    """The account's sessions, most recently started first."""
    with get_session() as db:
        query = db.query(IntervalSession).filter(
            IntervalSession.account_id == account_id,
        )
        if completed is not None:
            query = query.filter(IntervalSession.completed.is_(completed))
        return (
            query.order_by(
                IntervalSession.started_at.desc(), IntervalSession.id.desc(),
            )
            .limit(limit)
            .all()
        )


def session_stats(account_id: int) -> SessionStats:
    """Run the aggregate queries in a single session and fill a snapshot."""
    stats = SessionStats()

    with get_session() as db:
        done = (
            IntervalSession.account_id == account_id,
            IntervalSession.completed.is_(True),
        )

        # ── per-kind totals ───────────────────────────────────────────
        rows = (
            db.query(
                IntervalSession.kind,
                func.count(IntervalSession.id),
                func.coalesce(func.sum(IntervalSession.points_earned), 0),
                func.coalesce(func.sum(IntervalSession.duration_minutes), 0),
            )
            .filter(*done)
            .group_by(IntervalSession.kind)
            .all()
        )
        for kind, count, points, minutes in rows:
            stats.by_kind[kind] = {
                "count": int(count),
                "points": int(points),
                "minutes": int(minutes),
            }
            stats.total_sessions += int(count)
            stats.points_earned += int(points)
            stats.total_minutes += int(minutes)

        work = stats.by_kind.get(IntervalKind.WORK.value)
        stats.completed_intervals = work["count"] if work else 0
        if stats.total_sessions:
            stats.average_session_duration = round(
                stats.total_minutes / stats.total_sessions
            )

        # ── sessions per day (by start date) ─────────────────────────
        started = (
            db.query(IntervalSession.started_at)
            .filter(*done)
            .all()
        )
        per_day = Counter(row[0].date().isoformat() for row in started)
        stats.sessions_per_day = [
            {"date": day, "count": per_day[day]} for day in sorted(per_day)
        ]

    return stats
