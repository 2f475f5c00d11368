"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client
from supabase.client import ClientOptions

from checkin_tracker.adapters.jwks_client import HttpxJwksClient
from checkin_tracker.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from checkin_tracker.config import Settings
from checkin_tracker.services.attendance import AttendanceService
from checkin_tracker.services.checkins import CheckinService
from checkin_tracker.services.identity import IdentityVerifier


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_verifier: IdentityVerifier
    checkin_service: CheckinService
    attendance_service: AttendanceService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url,
        resolved_settings.supabase_service_key,
        options=ClientOptions(
            postgrest_client_timeout=resolved_settings.store_timeout_seconds
        ),
    )
    session_repository = SupabaseSessionRepository(
        supabase_client, table_name=resolved_settings.sessions_table
    )
    jwks_client = HttpxJwksClient.create(
        resolved_settings.auth0_domain,
        cache_ttl_seconds=resolved_settings.jwks_cache_seconds,
    )
    identity_verifier = IdentityVerifier(
        jwks_client=jwks_client,
        domain=resolved_settings.auth0_domain,
        audience=resolved_settings.auth0_audience,
        namespace=resolved_settings.auth0_namespace,
    )
    checkin_service = CheckinService(
        session_repository,
        default_history_limit=resolved_settings.history_limit,
    )
    attendance_service = AttendanceService(session_repository)

    async def close_resources() -> None:
        await jwks_client.close()

    return AppContainer(
        settings=resolved_settings,
        identity_verifier=identity_verifier,
        checkin_service=checkin_service,
        attendance_service=attendance_service,
        close_resources=close_resources,
    )
