"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from checkin_tracker.api.admin import router as admin_router
from checkin_tracker.api.auth import require_identity
from checkin_tracker.api.checkins import router as checkin_router
from checkin_tracker.app_logging import configure_logging
from checkin_tracker.containers import AppContainer
from checkin_tracker.domain.errors import (
    AuthenticationError,
    AuthorizationError,
    CheckinError,
    ConflictError,
    InvalidRangeError,
    StoreUnavailableError,
)
from checkin_tracker.domain.identity import Identity

# Public messages only; store diagnostics stay in the server log.
_ERROR_RESPONSES: list[tuple[type[CheckinError], int, str]] = [
    (
        ConflictError,
        status.HTTP_409_CONFLICT,
        "Your status was changed by another request. Please try again.",
    ),
    (InvalidRangeError, status.HTTP_400_BAD_REQUEST, "Invalid date range"),
    (
        StoreUnavailableError,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Service temporarily unavailable",
    ),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED, "Unauthorized"),
    (AuthorizationError, status.HTTP_403_FORBIDDEN, "Forbidden"),
]


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(checkin_router)
    app.include_router(admin_router)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # headers and bodies may carry tokens, so only log the route
        logger.info(
            "Request received",
            extra={"path": request.url.path, "method": request.method},
        )
        return await call_next(request)

    @app.exception_handler(CheckinError)
    async def checkin_error_handler(request: Request, exc: CheckinError) -> JSONResponse:
        """Map domain errors to HTTP responses."""
        for error_type, status_code, message in _ERROR_RESPONSES:
            if isinstance(exc, error_type):
                if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
                    logger.error(
                        "Request failed: %s",
                        exc,
                        extra={"path": request.url.path},
                    )
                return JSONResponse(status_code=status_code, content={"error": message})
        logger.error("Unhandled check-in error: %s", type(exc).__name__)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    @app.exception_handler(status.HTTP_404_NOT_FOUND)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Endpoint not found"},
        )

    @app.exception_handler(status.HTTP_405_METHOD_NOT_ALLOWED)
    async def method_not_allowed_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            content={"error": "Method not allowed"},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Request rejected", extra={"path": request.url.path})
        return JSONResponse(
            status_code=422,
            content={"error": "Invalid request parameters"},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/test")
    async def protected_test(
        identity: Identity = Depends(require_identity),
    ) -> dict[str, object]:
        """Echo the caller id to confirm authentication works."""
        return {
            "message": "Hello from protected API",
            "userId": identity.user_id,
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    @app.get("/api/user-info")
    async def user_info(
        identity: Identity = Depends(require_identity),
    ) -> dict[str, object]:
        """Return the caller's identity claims."""
        return {
            "userId": identity.user_id,
            "email": identity.email,
            "name": identity.display_name,
        }

    return app
