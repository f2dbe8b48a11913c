"""Authentication API schemas package.

Request payloads, user envelopes and the small success/error bodies are kept
in separate modules and re-exported here.
"""

from .misc import ErrorResponse, SuccessResponse
from .requests import OtpCodeStr, OtpRequest, OtpVerifyRequest
from .responses import UserOut, UserResponse

__all__ = [
    "OtpRequest",
    "OtpVerifyRequest",
    "OtpCodeStr",
    "UserOut",
    "UserResponse",
    "SuccessResponse",
    "ErrorResponse",
]
