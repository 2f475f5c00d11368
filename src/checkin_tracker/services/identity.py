"""Bearer token verification and claim extraction."""

import logging
from dataclasses import dataclass

import httpx
from jose import JWTError, jwt

from checkin_tracker.adapters.jwks_client import JwksClient
from checkin_tracker.domain.errors import AuthenticationError
from checkin_tracker.domain.identity import Identity

_logger = logging.getLogger(__name__)

_ALGORITHMS = ["RS256"]


@dataclass
class IdentityVerifier:
    """Verify Auth0 access tokens and build caller identities."""

    jwks_client: JwksClient
    domain: str
    audience: str
    namespace: str = ""

    @property
    def issuer(self) -> str:
        return f"https://{self.domain}/"

    async def verify(self, token: str) -> Identity:
        """Validate a bearer token and return the identity it carries."""
        if not token:
            raise AuthenticationError("Missing authorization token")
        try:
            kid = jwt.get_unverified_header(token).get("kid")
            signing_key = _select_key(await self.jwks_client.get_signing_keys(), kid)
            if signing_key is None:
                # signing keys may have rotated since they were cached
                signing_key = _select_key(
                    await self.jwks_client.get_signing_keys(refresh=True), kid
                )
            if signing_key is None:
                raise AuthenticationError("Unknown signing key")
            claims = jwt.decode(
                token,
                signing_key,
                algorithms=_ALGORITHMS,
                audience=self.audience,
                issuer=self.issuer,
            )
        except JWTError as exc:
            _logger.info("Token rejected: %s", type(exc).__name__)
            raise AuthenticationError("Invalid authorization token") from exc
        except (httpx.HTTPError, ValueError) as exc:
            _logger.exception("Failed to fetch signing keys")
            raise AuthenticationError("Unable to verify authorization token") from exc
        return self.identity_from_claims(claims)

    def identity_from_claims(self, claims: dict[str, object]) -> Identity:
        """Build an identity from decoded token claims."""
        subject = claims.get("sub")
        if not isinstance(subject, str) or not subject:
            raise AuthenticationError("Token has no subject")
        raw_roles = claims.get(self._namespaced("roles"))
        roles = (
            frozenset(role for role in raw_roles if isinstance(role, str))
            if isinstance(raw_roles, list)
            else frozenset()
        )
        return Identity(
            user_id=subject,
            display_name=self._string_claim(claims, "name"),
            email=self._string_claim(claims, "email"),
            roles=roles,
        )

    def _string_claim(self, claims: dict[str, object], name: str) -> str | None:
        for key in (f"{self.domain}/{name}", self._namespaced(name), name):
            value = claims.get(key)
            if isinstance(value, str) and value:
                return value
        return None

    def _namespaced(self, name: str) -> str:
        if not self.namespace:
            return name
        return f"{self.namespace.rstrip('/')}/{name}"


def _select_key(keys: dict[str, object], kid: object) -> dict[str, object] | None:
    entries = keys.get("keys")
    if not isinstance(entries, list):
        return None
    for entry in entries:
        if isinstance(entry, dict) and entry.get("kid") == kid:
            return entry
    return None
