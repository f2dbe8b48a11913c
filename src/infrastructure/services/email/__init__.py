from .otp_email_service import OtpEmailService

__all__ = ["OtpEmailService"]
