"""AuthUser entity: a read-only projection of identity-provider user state."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping


@dataclass(frozen=True, slots=True)
class AuthUser:
    """The user an access token belongs to, as reported by the identity provider.

    This subsystem never owns or caches users; an `AuthUser` is always resolved
    live from an access token and discarded after the request.

    Attributes:
        id: The provider's user identifier (a UUID for Supabase).
        email: The user's email address.
        attributes: Extensible provider fields (role, metadata, timestamps).
    """

    id: str
    email: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Flattens the user into a JSON-friendly mapping; `id` and `email` win
        over same-named attributes."""
        return {**self.attributes, "id": self.id, "email": self.email}
