"""Session cookie value object and the fixed cookie constants."""

from dataclasses import dataclass
from typing import Any, Dict, Final, Literal

ACCESS_TOKEN_COOKIE: Final = "access_token"
REFRESH_TOKEN_COOKIE: Final = "refresh_token"

# Supabase access tokens expire in 1 hour by default
DEFAULT_ACCESS_TOKEN_MAX_AGE: Final = 60 * 60
# Supabase refresh tokens expire in 60 days by default
DEFAULT_REFRESH_TOKEN_MAX_AGE: Final = 60 * 60 * 24 * 60


@dataclass(frozen=True, slots=True)
class SessionCookie:
    """A cookie carrying one half of a token pair to the browser.

    Session cookies are always HttpOnly, scoped to `/` and `SameSite=Lax`;
    only `secure` varies, and it is true exactly in production deployments.
    """

    name: str
    value: str
    max_age: int
    secure: bool = False
    http_only: bool = True
    same_site: Literal["lax", "strict", "none"] = "lax"
    path: str = "/"

    def as_set_cookie_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for `starlette.responses.Response.set_cookie`."""
        return {
            "key": self.name,
            "value": self.value,
            "max_age": self.max_age,
            "path": self.path,
            "secure": self.secure,
            "httponly": self.http_only,
            "samesite": self.same_site,
        }

    def __repr__(self) -> str:
        return f"SessionCookie(name={self.name!r}, max_age={self.max_age}, secure={self.secure})"
