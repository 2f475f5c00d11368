"""Error taxonomy for check-in operations."""


class CheckinError(Exception):
    """Base class for check-in errors."""


class ConflictError(CheckinError):
    """A concurrent write won; re-resolve status before retrying."""


class InvalidRangeError(CheckinError):
    """Query bounds are missing, malformed or reversed."""


class StoreUnavailableError(CheckinError):
    """The session store failed or timed out.

    For mutations the outcome is unknown: the write may or may not have applied.
    """


class DuplicateSessionError(CheckinError):
    """A session with the same user and check-in time already exists."""


class PreconditionFailedError(CheckinError):
    """The session was already closed when the conditional update ran."""


class AuthenticationError(CheckinError):
    """The bearer token is missing or invalid."""


class AuthorizationError(CheckinError):
    """The caller lacks the role required for an operation."""
