"""Email sender interface for one-time passcode delivery."""

from abc import ABC, abstractmethod


class IEmailService(ABC):
    """Delivers verification codes to users."""

    @abstractmethod
    async def send_otp_email(self, to_email: str, code: str, language: str = "en") -> bool:
        """Send a one-time passcode to `to_email`.

        Args:
            to_email: Recipient address (already normalized).
            code: The code to deliver; it has already been cached.
            language: Language code for email localization.

        Returns:
            bool: True if the email was sent successfully.

        Raises:
            EmailServiceError: If email delivery fails.
        """
        raise NotImplementedError
