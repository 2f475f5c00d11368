"""Supabase-backed attendance session repository."""

import logging
from dataclasses import dataclass
from datetime import datetime

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from checkin_tracker.domain.errors import (
    DuplicateSessionError,
    PreconditionFailedError,
    StoreUnavailableError,
)
from checkin_tracker.domain.sessions import CheckinSession
from checkin_tracker.services.checkins import SessionRepository

_logger = logging.getLogger(__name__)

_COLUMNS = "user_id, check_in_time, check_out_time, user_name, user_email"
_UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for attendance sessions.

    Rows are keyed by (user_id, check_in_time). Closing a session is a single
    conditional UPDATE filtered on check_out_time IS NULL, so of two racing
    check-outs only one gets the row back.
    """

    client: Client
    table_name: str = "checkin_sessions"

    def find_latest(self, user_id: str) -> CheckinSession | None:
        """Return the most recently opened session for a user."""
        response = _execute(
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .order("check_in_time", desc=True)
            .limit(1)
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def insert_open(
        self,
        user_id: str,
        check_in_time: datetime,
        user_name: str | None,
        user_email: str | None,
    ) -> CheckinSession:
        """Insert an open session row and return it."""
        response = _execute(
            self.client.table(self.table_name).insert(
                {
                    "user_id": user_id,
                    "check_in_time": check_in_time.isoformat(),
                    "check_out_time": None,
                    "user_name": user_name,
                    "user_email": user_email,
                }
            )
        )
        if not response.data:
            raise StoreUnavailableError("Session insert returned no row")
        return _parse_row(response.data[0])

    def close_session(
        self, user_id: str, check_in_time: datetime, check_out_time: datetime
    ) -> CheckinSession:
        """Set check_out_time on the session if it is still open."""
        response = _execute(
            self.client.table(self.table_name)
            .update({"check_out_time": check_out_time.isoformat()})
            .eq("user_id", user_id)
            .eq("check_in_time", check_in_time.isoformat())
            .is_("check_out_time", "null")
        )
        if not response.data:
            raise PreconditionFailedError("Session is no longer open")
        return _parse_row(response.data[0])

    def list_open_sessions(self) -> list[CheckinSession]:
        """Return all open sessions."""
        response = _execute(
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .is_("check_out_time", "null")
            .order("check_in_time", desc=True)
        )
        return [_parse_row(row) for row in response.data or []]

    def list_sessions_in_range(
        self, start: datetime, end: datetime
    ) -> list[CheckinSession]:
        """Return sessions with check_in_time in the inclusive range."""
        response = _execute(
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .gte("check_in_time", start.isoformat())
            .lte("check_in_time", end.isoformat())
            .order("check_in_time", desc=True)
        )
        return [_parse_row(row) for row in response.data or []]

    def list_user_sessions(self, user_id: str, limit: int) -> list[CheckinSession]:
        """Return a user's most recent sessions."""
        response = _execute(
            self.client.table(self.table_name)
            .select(_COLUMNS)
            .eq("user_id", user_id)
            .order("check_in_time", desc=True)
            .limit(limit)
        )
        return [_parse_row(row) for row in response.data or []]


def _execute(query):  # type: ignore[no-untyped-def]
    """Run a PostgREST query, translating failures into store errors."""
    try:
        return query.execute()
    except APIError as exc:
        if exc.code == _UNIQUE_VIOLATION:
            raise DuplicateSessionError("Session already exists") from exc
        _logger.exception("Supabase request failed", extra={"code": exc.code})
        raise StoreUnavailableError("Session store request failed") from exc
    except httpx.HTTPError as exc:
        _logger.exception("Supabase request did not complete")
        raise StoreUnavailableError("Session store is unavailable") from exc


def _parse_row(row: dict[str, object]) -> CheckinSession:
    check_out_raw = row.get("check_out_time")
    return CheckinSession(
        user_id=str(row["user_id"]),
        check_in_time=datetime.fromisoformat(str(row["check_in_time"])),
        check_out_time=(
            datetime.fromisoformat(check_out_raw)
            if isinstance(check_out_raw, str) and check_out_raw
            else None
        ),
        user_name=_optional_str(row.get("user_name")),
        user_email=_optional_str(row.get("user_email")),
    )


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) and value else None
