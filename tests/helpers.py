"""Shared test helpers for Pomodorise."""

from datetime import datetime, timedelta

from pomodorise.database.db import get_session
from pomodorise.database.models import Account, IntervalSession, Task


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None


_counter = 0


def make_account(points: int = 0, level: int = 1, streak: int = 0) -> Account:
    """Insert an account directly, bypassing registration."""
    global _counter
    _counter += 1
    account = Account(
        email=f"user{_counter}@example.com",
        points=points,
        level=level,
        streak=streak,
    )
    with get_session() as db:
        db.add(account)
        db.flush()
    return account


def make_task(
    account_id: int,
    estimated: int = 4,
    completed: int = 0,
    status: str = "pending",
) -> Task:
    task = Task(
        account_id=account_id,
        title="Write report",
        estimated_intervals=estimated,
        completed_intervals=completed,
        status=status,
    )
    with get_session() as db:
        db.add(task)
        db.flush()
    return task


def make_completed_session(
    account_id: int,
    completed_at: datetime,
    *,
    kind: str = "work",
    duration: int = 25,
    points: int = 15,
    task_id: int | None = None,
) -> IntervalSession:
    """Insert an already-completed session, e.g. one finished days ago."""
    record = IntervalSession(
        account_id=account_id,
        task_id=task_id,
        kind=kind,
        duration_minutes=duration,
        completed=True,
        points_earned=points,
        started_at=completed_at - timedelta(minutes=duration),
        completed_at=completed_at,
    )
    with get_session() as db:
        db.add(record)
        db.flush()
    return record


def load(model, record_id):
    """Re-read a row from the database."""
    with get_session() as db:
        return db.get(model, record_id)
