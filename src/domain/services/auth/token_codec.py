"""Token codec: provider sessions to token pairs, token pairs to cookies.

The identity provider already returns access and refresh tokens. These helpers
convert its session object into the internal `TokenPair`, derive the two
session cookies from a pair, and verify access tokens against the provider's
signing secret.
"""

import time
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from jwt import decode as jwt_decode, PyJWTError
from structlog import get_logger

from src.core.exceptions import ConfigurationError
from src.domain.value_objects.session_cookie import (
    ACCESS_TOKEN_COOKIE,
    DEFAULT_ACCESS_TOKEN_MAX_AGE,
    DEFAULT_REFRESH_TOKEN_MAX_AGE,
    REFRESH_TOKEN_COOKIE,
    SessionCookie,
)
from src.domain.value_objects.token_pair import ProviderSession, TokenPair

logger = get_logger(__name__)

Clock = Callable[[], float]


def to_token_pair(session: ProviderSession, now: Clock = time.time) -> TokenPair:
    """Converts a provider session into a `TokenPair`.

    `expires_at` is the current epoch second plus the provider-declared
    `expires_in`. A session of the wrong shape is a programming error and
    surfaces as an AttributeError, not as a runtime result.
    """
    return TokenPair(
        access_token=session.access_token,
        refresh_token=session.refresh_token,
        expires_at=int(now()) + int(session.expires_in),
    )


def build_access_token_cookie(
    token: str, max_age: int = DEFAULT_ACCESS_TOKEN_MAX_AGE, *, secure: bool = False
) -> SessionCookie:
    return SessionCookie(name=ACCESS_TOKEN_COOKIE, value=token, max_age=max_age, secure=secure)


def build_refresh_token_cookie(
    token: str, max_age: int = DEFAULT_REFRESH_TOKEN_MAX_AGE, *, secure: bool = False
) -> SessionCookie:
    return SessionCookie(name=REFRESH_TOKEN_COOKIE, value=token, max_age=max_age, secure=secure)


def build_session_cookies(
    token_pair: TokenPair,
    *,
    secure: bool = False,
    refresh_max_age: int = DEFAULT_REFRESH_TOKEN_MAX_AGE,
    now: Clock = time.time,
) -> Tuple[SessionCookie, SessionCookie]:
    """Builds the access and refresh cookies for one token pair.

    The access cookie lives exactly as long as the access token; the refresh
    cookie uses the fixed refresh lifetime.
    """
    access_cookie = build_access_token_cookie(
        token_pair.access_token, token_pair.seconds_remaining(now()), secure=secure
    )
    refresh_cookie = build_refresh_token_cookie(
        token_pair.refresh_token, refresh_max_age, secure=secure
    )
    return access_cookie, refresh_cookie


def verify_access_token(
    token: str,
    secret: str,
    *,
    audience: Optional[str] = None,
    algorithms: Sequence[str] = ("HS256",),
) -> Optional[Dict[str, Any]]:
    """Verifies a signed access token and returns its claims.

    Returns None (never raises) when verification fails for any reason:
    expired, malformed, bad signature, or wrong audience.

    Raises:
        ConfigurationError: If `secret` is empty. A missing secret is a
            deployment problem, not a verification outcome.
    """
    if not secret:
        raise ConfigurationError("An access token signing secret must be configured")
    if not token:
        return None

    try:
        return jwt_decode(
            token,
            secret,
            algorithms=list(algorithms),
            audience=audience,
            options={"require": ["exp", "sub"], "verify_aud": audience is not None},
        )
    except PyJWTError as exc:
        logger.debug("access_token_verification_failed", reason=type(exc).__name__)
        return None
