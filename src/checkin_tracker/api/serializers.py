"""JSON projections of sessions for API responses."""

from datetime import datetime

from checkin_tracker.domain.sessions import CheckinSession


def iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def serialize_own_session(session: CheckinSession) -> dict[str, object]:
    return {
        "checkInTime": iso(session.check_in_time),
        "checkOutTime": iso(session.check_out_time),
    }


def serialize_active_session(session: CheckinSession) -> dict[str, object]:
    return {
        "userId": session.user_id,
        "userName": session.user_name,
        "userEmail": session.user_email,
        "checkInTime": iso(session.check_in_time),
    }


def serialize_history_session(session: CheckinSession) -> dict[str, object]:
    return {
        **serialize_active_session(session),
        "checkOutTime": iso(session.check_out_time),
    }
