"""Utility functions for the session routes.

Shared cookie handling for the endpoints that issue or clear session cookies.
"""

from starlette.responses import Response

from src.core.config.settings import settings
from src.domain.services.auth.token_codec import build_session_cookies
from src.domain.value_objects.session_cookie import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from src.domain.value_objects.token_pair import TokenPair


def set_session_cookies(response: Response, token_pair: TokenPair) -> None:
    """Attaches the access and refresh cookies for `token_pair` to `response`.

    The access cookie expires with the access token; the `secure` flag is on
    exactly in production.
    """
    for cookie in build_session_cookies(
        token_pair,
        secure=settings.is_production,
        refresh_max_age=settings.REFRESH_TOKEN_COOKIE_MAX_AGE,
    ):
        response.set_cookie(**cookie.as_set_cookie_kwargs())


def clear_session_cookies(response: Response) -> None:
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            name,
            path="/",
            secure=settings.is_production,
            httponly=True,
            samesite="lax",
        )
