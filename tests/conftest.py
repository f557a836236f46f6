"""Shared pytest fixtures for Pomodorise tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from pomodorise.database.db import configure_engine, init_db
from pomodorise.sessions.lifecycle import IntervalManager

from helpers import make_account


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def manager(qapp):
    """Fresh IntervalManager with default bounds."""
    return IntervalManager(parent=None)


@pytest.fixture
def account():
    """A brand-new account: 0 points, level 1, no streak."""
    return make_account()
