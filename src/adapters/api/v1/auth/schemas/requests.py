"""Request-payload Pydantic models for the session endpoints."""

from pydantic import BaseModel, EmailStr, Field, constr

# ---------------------------------------------------------------------------
# Shared / primitive types ---------------------------------------------------
# ---------------------------------------------------------------------------

OtpCodeStr = constr(strip_whitespace=True, min_length=6, max_length=10)

# ---------------------------------------------------------------------------
# Concrete request models ----------------------------------------------------
# ---------------------------------------------------------------------------


class OtpRequest(BaseModel):
    """Payload expected by ``POST /auth/otp/request``."""

    email: EmailStr = Field(..., examples=["jane@example.com"])


class OtpVerifyRequest(BaseModel):
    """Payload expected by ``POST /auth/otp/verify``."""

    email: EmailStr = Field(..., examples=["jane@example.com"])
    code: OtpCodeStr = Field(..., examples=["123456"], description="Code received by email")
