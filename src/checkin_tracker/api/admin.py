"""Admin attendance endpoints, gated on the admin role."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request

from checkin_tracker.api.auth import require_admin
from checkin_tracker.api.serializers import (
    serialize_active_session,
    serialize_history_session,
)

if TYPE_CHECKING:
    from checkin_tracker.containers import AppContainer

router = APIRouter(
    prefix="/api/admin/checkins",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/active")
async def active_checkins(request: Request) -> dict[str, object]:
    """Return everyone currently checked in."""
    container: AppContainer = request.app.state.container
    sessions = container.attendance_service.active_roster()
    return {"sessions": [serialize_active_session(session) for session in sessions]}


@router.get("/history")
async def checkin_history(
    request: Request, start: str | None = None, end: str | None = None
) -> dict[str, object]:
    """Return sessions checked in between start and end, inclusive."""
    container: AppContainer = request.app.state.container
    sessions = container.attendance_service.ranged_history(start, end)
    return {"sessions": [serialize_history_session(session) for session in sessions]}
