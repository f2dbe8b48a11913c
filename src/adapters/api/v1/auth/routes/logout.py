"""Logout endpoint.

Clears both session cookies. Tokens are not revoked with the provider; an
access token stays valid until it expires.
"""

from fastapi import APIRouter, Response, status

from src.adapters.api.v1.auth.schemas import SuccessResponse
from src.adapters.api.v1.auth.utils import clear_session_cookies

router = APIRouter()


@router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Clear auth cookies",
)
async def logout(response: Response) -> SuccessResponse:
    clear_session_cookies(response)
    return SuccessResponse(success=True)
