"""Database connection and session management."""

from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from ..settings import APP_DIR, DEFAULT_DB_PATH
from .models import Base

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _make_engine(url: str):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(url, connect_args=connect_args, echo=False)


def _get_engine():
    global _engine
    if _engine is None:
        APP_DIR.mkdir(parents=True, exist_ok=True)
        _engine = _make_engine(f"sqlite:///{DEFAULT_DB_PATH}")
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database instead of the real one on disk."""
    global _engine, _SessionFactory
    _SessionFactory = None
    if _engine is not None:
        _engine.dispose()
    _engine = _make_engine(url)


def init_db() -> None:
    """Create all tables."""
    Base.metadata.create_all(_get_engine())


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
