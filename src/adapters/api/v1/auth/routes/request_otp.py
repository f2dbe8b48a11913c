"""OTP request endpoint.

Issues a fresh one-time code for an email address and delivers it by email.
The code itself never appears in the response.
"""

import structlog
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from src.adapters.api.v1.auth.schemas import ErrorResponse, OtpRequest
from src.core.config.settings import settings
from src.core.logging import mask_email
from src.core.ratelimiter import limiter
from src.infrastructure.dependency_injection.auth_dependencies import SessionServiceDep

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Request OTP email",
    description="Sends a one-time verification code to the given email address.",
    responses={
        204: {"description": "Code issued and emailed"},
        400: {"model": ErrorResponse, "description": "Provider rejected the request or delivery failed"},
        429: {"model": ErrorResponse, "description": "Too many requests"},
    },
)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def request_otp(
    request: Request,
    payload: OtpRequest,
    session_service: SessionServiceDep,
) -> Response:
    result = await session_service.request_otp(payload.email)
    if not result.success:
        logger.info("otp_request_failed", email=mask_email(payload.email), error=result.error)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": result.error})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
