"""Authentication router package: bundles the OTP session endpoints."""

from fastapi import APIRouter

from .routes import logout as logout_route
from .routes import me as me_route
from .routes import refresh as refresh_route
from .routes import request_otp as request_otp_route
from .routes import verify_otp as verify_otp_route

router = APIRouter(prefix="/auth", tags=["auth"])

# Delegate to sub-routers ----------------------------------------------------

router.include_router(request_otp_route.router, prefix="/otp/request")
router.include_router(verify_otp_route.router, prefix="/otp/verify")
router.include_router(refresh_route.router, prefix="/refresh")
router.include_router(logout_route.router, prefix="/logout")
router.include_router(me_route.router, prefix="/me")

__all__ = ["router"]
