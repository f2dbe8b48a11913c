"""Session refresh endpoint.

Rotates the token pair using the refresh token cookie. On failure no cookie
is written, so the caller keeps whatever it had.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Cookie, Response, status

from src.adapters.api.v1.auth.schemas import ErrorResponse, SuccessResponse
from src.adapters.api.v1.auth.utils import set_session_cookies
from src.core.exceptions import AuthenticationError
from src.domain.value_objects.session_cookie import REFRESH_TOKEN_COOKIE
from src.infrastructure.dependency_injection.auth_dependencies import SessionServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Refresh access / refresh tokens",
    responses={401: {"model": ErrorResponse, "description": "Missing or rejected refresh token"}},
)
async def refresh_session(
    response: Response,
    session_service: SessionServiceDep,
    refresh_token: Annotated[Optional[str], Cookie(alias=REFRESH_TOKEN_COOKIE)] = None,
) -> SuccessResponse:
    if not refresh_token:
        raise AuthenticationError("No refresh token", code="missing_refresh_token")

    token_pair = await session_service.refresh_session(refresh_token)
    if token_pair is None:
        raise AuthenticationError("Invalid refresh token", code="invalid_refresh_token")

    set_session_cookies(response, token_pair)
    return SuccessResponse(success=True)
