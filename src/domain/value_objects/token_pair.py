"""Value objects describing an issued session: the provider session and the
internal token pair derived from it."""

from dataclasses import dataclass
from typing import Optional

from src.domain.entities.auth_user import AuthUser


@dataclass(frozen=True, slots=True)
class ProviderSession:
    """A session as issued by the identity provider.

    Attributes:
        access_token: Short-lived signed access token.
        refresh_token: Long-lived opaque refresh token.
        expires_in: Remaining access token lifetime in seconds at issuance.
        token_type: Token type reported by the provider.
        user: The user the session belongs to, when the provider included it.
    """

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "bearer"
    user: Optional[AuthUser] = None

    def __repr__(self) -> str:
        return f"ProviderSession(token_type={self.token_type!r}, expires_in={self.expires_in})"


@dataclass(frozen=True, slots=True)
class TokenPair:
    """The internal access/refresh token representation.

    Immutable once created and never persisted server-side; it is handed to
    the caller, which turns it into session cookies.

    Attributes:
        access_token: Opaque access token.
        refresh_token: Opaque refresh token.
        expires_at: Epoch seconds at which the access token expires, so
            calling layers can decide when to rotate.
    """

    access_token: str
    refresh_token: str
    expires_at: int

    def seconds_remaining(self, now: float) -> int:
        """Remaining access token lifetime at `now`, never negative."""
        return max(self.expires_at - int(now), 0)

    def __repr__(self) -> str:
        # Tokens are credentials; keep them out of logs and tracebacks.
        return f"TokenPair(expires_at={self.expires_at})"
