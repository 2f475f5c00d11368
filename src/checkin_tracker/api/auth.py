"""Request authentication dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, Request

from checkin_tracker.domain.errors import AuthenticationError, AuthorizationError
from checkin_tracker.domain.identity import Identity

if TYPE_CHECKING:
    from checkin_tracker.containers import AppContainer

_BEARER_PREFIX = "bearer "


async def require_identity(
    request: Request, authorization: str | None = Header(default=None)
) -> Identity:
    """Verify the bearer token and return the caller identity."""
    container: AppContainer = request.app.state.container
    return await container.identity_verifier.verify(_bearer_token(authorization))


async def require_admin(
    request: Request, identity: Identity = Depends(require_identity)
) -> Identity:
    """Ensure the caller carries the configured admin role."""
    container: AppContainer = request.app.state.container
    if not identity.has_role(container.settings.admin_role):
        raise AuthorizationError("Admin role required")
    return identity


def _bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthenticationError("Missing authorization token")
    value = authorization.strip()
    if value.lower().startswith(_BEARER_PREFIX):
        value = value[len(_BEARER_PREFIX) :].strip()
    if not value:
        raise AuthenticationError("Missing authorization token")
    return value
