"""Domain models for attendance sessions."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CheckinSession:
    """One continuous checked-in interval for a user."""

    user_id: str
    check_in_time: datetime
    check_out_time: datetime | None = None
    user_name: str | None = None
    user_email: str | None = None

    @property
    def is_open(self) -> bool:
        """Return True while the session has no check-out time."""
        return self.check_out_time is None


@dataclass(frozen=True)
class SessionState:
    """Check-in state derived from a user's latest session."""

    latest: CheckinSession | None

    @property
    def open_session(self) -> CheckinSession | None:
        if self.latest is not None and self.latest.is_open:
            return self.latest
        return None

    @property
    def is_open(self) -> bool:
        return self.open_session is not None
