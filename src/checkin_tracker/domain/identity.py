"""Caller identity value object."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Identity:
    """Verified caller identity built at the authentication boundary."""

    user_id: str
    display_name: str | None = None
    email: str | None = None
    roles: frozenset[str] = field(default_factory=frozenset)

    def has_role(self, role: str) -> bool:
        """Return True when the identity carries the given role."""
        return role in self.roles
