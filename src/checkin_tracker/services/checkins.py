"""Check-in state machine over the per-user session log."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from checkin_tracker.domain.errors import (
    ConflictError,
    DuplicateSessionError,
    PreconditionFailedError,
)
from checkin_tracker.domain.identity import Identity
from checkin_tracker.domain.sessions import CheckinSession, SessionState

_logger = logging.getLogger(__name__)

_TICK = timedelta(microseconds=1)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class SessionRepository(Protocol):
    """Persistence interface for attendance sessions."""

    def find_latest(self, user_id: str) -> CheckinSession | None:
        """Return the most recently opened session for a user, if any."""

    def insert_open(
        self,
        user_id: str,
        check_in_time: datetime,
        user_name: str | None,
        user_email: str | None,
    ) -> CheckinSession:
        """Create an open session; raise DuplicateSessionError on key collision."""

    def close_session(
        self, user_id: str, check_in_time: datetime, check_out_time: datetime
    ) -> CheckinSession:
        """Set the check-out time only if it is still unset.

        Raises PreconditionFailedError when the session was already closed.
        """

    def list_open_sessions(self) -> list[CheckinSession]:
        """Return all sessions without a check-out time."""

    def list_sessions_in_range(
        self, start: datetime, end: datetime
    ) -> list[CheckinSession]:
        """Return sessions whose check-in time falls within [start, end]."""

    def list_user_sessions(self, user_id: str, limit: int) -> list[CheckinSession]:
        """Return a user's most recent sessions, newest first."""


@dataclass(frozen=True)
class CheckinStatus:
    """Current check-in status for a user."""

    checked_in: bool
    check_in_time: datetime | None = None


@dataclass
class CheckinService:
    """Toggle protocol and per-user queries.

    State is never cached: every call re-reads the latest session from the
    repository, and the only mutual exclusion is the repository's conditional
    close. Conflicts are reported to the caller and never retried here.
    """

    repository: SessionRepository
    clock: Clock = utc_now
    default_history_limit: int = 50

    def resolve(self, user_id: str) -> SessionState:
        """Return whether the user currently has an open session."""
        return SessionState(latest=self.repository.find_latest(user_id))

    def toggle(self, identity: Identity) -> CheckinSession:
        """Open a session if the user is checked out, otherwise close it."""
        state = self.resolve(identity.user_id)
        if state.open_session is None:
            return self._check_in(identity, state.latest)
        return self._check_out(state.open_session)

    def _check_in(
        self, identity: Identity, latest: CheckinSession | None
    ) -> CheckinSession:
        user_id = identity.user_id
        check_in_time = self.clock()
        # a new session starts after the previous one ended, even if clocks drift
        if latest is not None:
            floor = (latest.check_out_time or latest.check_in_time) + _TICK
            check_in_time = max(check_in_time, floor)
        try:
            session = self.repository.insert_open(
                user_id,
                check_in_time,
                user_name=identity.display_name,
                user_email=identity.email,
            )
        except DuplicateSessionError as exc:
            _logger.warning(
                "Check-in collided with an existing session",
                extra={"user_id": user_id},
            )
            raise ConflictError("Session already exists for this timestamp") from exc
        _logger.info("User checked in", extra={"user_id": user_id})
        return session

    def _check_out(self, open_session: CheckinSession) -> CheckinSession:
        user_id = open_session.user_id
        check_out_time = max(self.clock(), open_session.check_in_time)
        try:
            session = self.repository.close_session(
                user_id, open_session.check_in_time, check_out_time
            )
        except PreconditionFailedError as exc:
            _logger.warning(
                "Check-out lost a race with a concurrent request",
                extra={"user_id": user_id},
            )
            raise ConflictError("Session was closed by another request") from exc
        _logger.info("User checked out", extra={"user_id": user_id})
        return session

    def status(self, user_id: str) -> CheckinStatus:
        """Return the check-in flag and the open session's start time."""
        state = self.resolve(user_id)
        if state.open_session is None:
            return CheckinStatus(checked_in=False)
        return CheckinStatus(
            checked_in=True, check_in_time=state.open_session.check_in_time
        )

    def history(self, user_id: str, limit: int | None = None) -> list[CheckinSession]:
        """Return the user's recent sessions, newest first."""
        resolved_limit = limit or self.default_history_limit
        sessions = self.repository.list_user_sessions(user_id, resolved_limit)
        return sorted(sessions, key=lambda s: s.check_in_time, reverse=True)
