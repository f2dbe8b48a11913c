"""Miscellaneous envelope schemas used by the auth API."""

from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Acknowledgment returned by refresh and logout."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Body of every 4xx answer from the auth endpoints."""

    error: str
