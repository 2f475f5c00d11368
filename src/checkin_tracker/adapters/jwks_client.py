"""JSON Web Key Set client for the identity provider."""

from dataclasses import dataclass, field
from typing import Protocol

import httpx

from checkin_tracker.services.cache import Cache, InMemoryCache

_CACHE_KEY = "jwks"


class JwksClient(Protocol):
    """Interface for fetching identity provider signing keys."""

    async def get_signing_keys(self, refresh: bool = False) -> dict[str, object]:
        """Return the raw JWKS document."""


@dataclass
class HttpxJwksClient(JwksClient):
    """JWKS client implemented with httpx and a TTL cache."""

    jwks_url: str
    http_client: httpx.AsyncClient
    cache_ttl_seconds: int = 600
    cache: Cache = field(default_factory=InMemoryCache)

    @classmethod
    def create(cls, domain: str, cache_ttl_seconds: int = 600) -> "HttpxJwksClient":
        """Create a JWKS client for an Auth0 tenant domain."""
        return cls(
            jwks_url=f"https://{domain}/.well-known/jwks.json",
            http_client=httpx.AsyncClient(),
            cache_ttl_seconds=cache_ttl_seconds,
        )

    async def get_signing_keys(self, refresh: bool = False) -> dict[str, object]:
        """Return cached signing keys, fetching them when stale or on refresh."""
        if not refresh:
            cached = self.cache.get(_CACHE_KEY)
            if isinstance(cached, dict):
                return cached
        response = await self.http_client.get(self.jwks_url, timeout=10)
        response.raise_for_status()
        payload = response.json()
        self.cache.set(_CACHE_KEY, payload, ttl_seconds=self.cache_ttl_seconds)
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
