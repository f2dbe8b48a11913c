"""Current-user endpoint.

The access token cookie is first verified locally against the provider's
signing secret; only a token that passes is sent to the provider for lookup.
"""

from typing import Annotated, Optional

import structlog
from fastapi import APIRouter, Cookie, status

from src.adapters.api.v1.auth.schemas import ErrorResponse, UserOut, UserResponse
from src.core.config.settings import settings
from src.core.exceptions import AuthenticationError
from src.domain.services.auth.token_codec import verify_access_token
from src.domain.value_objects.session_cookie import ACCESS_TOKEN_COOKIE
from src.infrastructure.dependency_injection.auth_dependencies import SessionServiceDep

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user from access token",
    responses={401: {"model": ErrorResponse, "description": "Missing, invalid or expired access token"}},
)
async def get_current_user(
    session_service: SessionServiceDep,
    access_token: Annotated[Optional[str], Cookie(alias=ACCESS_TOKEN_COOKIE)] = None,
) -> UserResponse:
    if not access_token:
        raise AuthenticationError("Not authenticated", code="missing_access_token")

    claims = verify_access_token(
        access_token,
        settings.SUPABASE_JWT_SECRET.get_secret_value(),
        audience=settings.JWT_AUDIENCE or None,
    )
    if claims is None:
        raise AuthenticationError("Invalid token", code="invalid_access_token")

    user = await session_service.resolve_user(access_token)
    if user is None:
        logger.info("access_token_rejected_by_provider", sub=claims.get("sub"))
        raise AuthenticationError("Invalid token", code="invalid_access_token")

    return UserResponse(user=UserOut.from_entity(user))
