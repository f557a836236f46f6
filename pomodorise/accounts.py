"""Account registration and progress lookups.

Credentials live elsewhere: every function here trusts the ``account_id``
it's handed.
"""

from __future__ import annotations

import logging
import re

from sqlalchemy.exc import IntegrityError

from .database.db import get_session
from .database.models import Account
from .errors import AccountNotFound, ValidationFailed
from .gamification.scoring import level_summary

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
MAX_NAME_LENGTH = 50


def create_account(email: str, name: str | None = None) -> Account:
    """Register a new account at level 1 with no points and no streak."""
    if not isinstance(email, str) or not _EMAIL_RE.match(email.strip()):
        raise ValidationFailed(f"invalid email address: {email!r}")
    email = email.strip().lower()
    if name is not None:
        name = name.strip() or None
        if name is not None and len(name) > MAX_NAME_LENGTH:
            raise ValidationFailed(
                f"name can't exceed {MAX_NAME_LENGTH} characters"
            )

    account = Account(email=email, name=name, points=0, level=1, streak=0)
    try:
        with get_session() as db:
            db.add(account)
            db.flush()
    except IntegrityError:
        raise ValidationFailed(f"email already registered: {email}") from None
    logger.info("Registered account %d", account.id)
    return account


def get_account(account_id: int) -> Account:
    with get_session() as db:
        account = db.get(Account, account_id)
        if account is None:
            raise AccountNotFound(f"Account {account_id} not found")
        return account


def account_progress(account_id: int) -> dict:
    """Level summary plus the current streak, for progress displays."""
    account = get_account(account_id)
    progress = level_summary(account.points)
    progress["streak"] = account.streak
    return progress
