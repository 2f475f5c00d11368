"""Attendance reporting for administrators."""

from dataclasses import dataclass
from datetime import UTC, datetime

from checkin_tracker.domain.errors import InvalidRangeError
from checkin_tracker.domain.sessions import CheckinSession
from checkin_tracker.services.checkins import SessionRepository


@dataclass
class AttendanceService:
    """Read-only projections across all users."""

    repository: SessionRepository

    def active_roster(self) -> list[CheckinSession]:
        """Return currently open sessions, most recent check-in first."""
        sessions = self.repository.list_open_sessions()
        return sorted(sessions, key=lambda s: s.check_in_time, reverse=True)

    def ranged_history(
        self, start: datetime | str | None, end: datetime | str | None
    ) -> list[CheckinSession]:
        """Return sessions checked in within [start, end], newest first."""
        range_start, range_end = parse_range(start, end)
        sessions = self.repository.list_sessions_in_range(range_start, range_end)
        return sorted(sessions, key=lambda s: s.check_in_time, reverse=True)


def parse_range(
    start: datetime | str | None, end: datetime | str | None
) -> tuple[datetime, datetime]:
    """Parse inclusive range bounds, rejecting missing or reversed input."""
    range_start = _parse_bound("start", start)
    range_end = _parse_bound("end", end)
    if range_start > range_end:
        raise InvalidRangeError("start must not be after end")
    return range_start, range_end


def _parse_bound(name: str, value: datetime | str | None) -> datetime:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidRangeError(f"{name} is required")
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as exc:
            raise InvalidRangeError(f"{name} is not an ISO 8601 timestamp") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
