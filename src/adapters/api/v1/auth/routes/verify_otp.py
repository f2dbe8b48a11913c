"""OTP verification endpoint.

Exchanges a valid code for a session. The token pair is delivered only as
HttpOnly cookies; the body carries the signed-in user.
"""

import structlog
from fastapi import APIRouter, Response, status

from src.adapters.api.v1.auth.schemas import ErrorResponse, OtpVerifyRequest, UserOut, UserResponse
from src.adapters.api.v1.auth.utils import set_session_cookies
from src.core.exceptions import AuthenticationError
from src.infrastructure.dependency_injection.auth_dependencies import SessionServiceDep

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Verify OTP and sign in",
    responses={401: {"model": ErrorResponse, "description": "Invalid, expired or reused code"}},
)
async def verify_otp(
    payload: OtpVerifyRequest,
    response: Response,
    session_service: SessionServiceDep,
) -> UserResponse:
    """Verifies the code with the provider and consumes it from the cache.

    Raises:
        AuthenticationError: If the code is rejected, expired or already used.
    """
    token_pair = await session_service.verify_otp(payload.email, payload.code)
    if token_pair is None:
        raise AuthenticationError("Invalid code", code="invalid_otp")

    set_session_cookies(response, token_pair)

    user = await session_service.resolve_user(token_pair.access_token)
    return UserResponse(user=UserOut.from_entity(user) if user else None)
