"""Check-in endpoints for the signed-in user."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Query, Request

from checkin_tracker.api.auth import require_identity
from checkin_tracker.api.serializers import iso, serialize_own_session
from checkin_tracker.domain.identity import Identity

if TYPE_CHECKING:
    from checkin_tracker.containers import AppContainer

router = APIRouter(prefix="/api/checkin", tags=["checkin"])


@router.get("/status")
async def checkin_status(
    request: Request, identity: Identity = Depends(require_identity)
) -> dict[str, object]:
    """Return whether the caller is currently checked in."""
    container: AppContainer = request.app.state.container
    status = container.checkin_service.status(identity.user_id)
    return {
        "checkedIn": status.checked_in,
        "currentSession": (
            {"checkInTime": iso(status.check_in_time)} if status.checked_in else None
        ),
    }


@router.post("")
async def toggle_checkin(
    request: Request, identity: Identity = Depends(require_identity)
) -> dict[str, object]:
    """Check the caller in, or out if they are already checked in."""
    container: AppContainer = request.app.state.container
    session = container.checkin_service.toggle(identity)
    return {"checkedIn": session.is_open, "session": serialize_own_session(session)}


@router.get("/history")
async def checkin_history(
    request: Request,
    identity: Identity = Depends(require_identity),
    limit: int | None = Query(default=None, ge=1, le=500),
) -> dict[str, object]:
    """Return the caller's recent sessions, newest first."""
    container: AppContainer = request.app.state.container
    sessions = container.checkin_service.history(identity.user_id, limit)
    return {"sessions": [serialize_own_session(session) for session in sessions]}
