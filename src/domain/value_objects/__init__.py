"""Domain Value Objects for the session domain.

Value objects are immutable objects that describe domain concepts by their
attributes rather than their identity.
"""

from .session_cookie import (
    ACCESS_TOKEN_COOKIE,
    DEFAULT_ACCESS_TOKEN_MAX_AGE,
    DEFAULT_REFRESH_TOKEN_MAX_AGE,
    REFRESH_TOKEN_COOKIE,
    SessionCookie,
)
from .token_pair import ProviderSession, TokenPair

__all__ = [
    "ACCESS_TOKEN_COOKIE",
    "REFRESH_TOKEN_COOKIE",
    "DEFAULT_ACCESS_TOKEN_MAX_AGE",
    "DEFAULT_REFRESH_TOKEN_MAX_AGE",
    "ProviderSession",
    "SessionCookie",
    "TokenPair",
]
