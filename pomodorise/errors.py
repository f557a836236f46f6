"""Error taxonomy for Pomodorise.

Every failure a caller can observe is one of these.  Ownership failures are
reported as :class:`NotFound` so a caller can't probe for other accounts'
records.
"""

from __future__ import annotations


class PomodoriseError(Exception):
    """Base class for all Pomodorise errors."""


class ValidationFailed(PomodoriseError):
    """Malformed input, rejected before any state is touched."""


class NotFound(PomodoriseError):
    """A referenced record doesn't exist or isn't owned by the caller."""


class SessionNotFound(NotFound):
    pass


class TaskNotFound(NotFound):
    pass


class AccountNotFound(NotFound):
    pass


class Conflict(PomodoriseError):
    """The record exists but is in a state that forbids the request."""


class AlreadyCompleted(Conflict):
    """Completion was requested for a session that is already completed."""

    def __init__(self, session_id: int) -> None:
        super().__init__(f"Session {session_id} is already completed")
        self.session_id = session_id
