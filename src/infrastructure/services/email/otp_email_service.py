"""OTP email delivery over SMTP.

Renders the verification code into the bundled Jinja2 templates and sends it
with fastapi-mail. When `EMAIL_TEST_MODE` is enabled (the default for the
development and test environments) the message is rendered and logged with a
masked recipient instead of being sent.

Security Features:
- HTML auto-escaping for the HTML template
- Certificate validation on every SMTP connection
- Recipients are masked in every log event
"""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import structlog
from fastapi_mail import ConnectionConfig, FastMail, MessageSchema
from fastapi_mail.schemas import MessageType, MultipartSubtypeEnum
from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound, select_autoescape

from src.core.config.settings import Settings, settings
from src.core.exceptions import EmailServiceError, TemplateRenderError
from src.core.logging import mask_email
from src.domain.interfaces.email import IEmailService

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parents[3] / "templates" / "email"

OTP_HTML_TEMPLATE = "otp_code.html"
OTP_TEXT_TEMPLATE = "otp_code.txt"


class OtpEmailService(IEmailService):
    """Sends one-time passcodes by email.

    Attributes:
        config: Settings the service was built from
        jinja_env: Jinja2 environment for template rendering
        fastmail: FastMail client, None in test mode
    """

    def __init__(self, config: Settings = settings, fastmail: Optional[FastMail] = None):
        self.config = config
        self.jinja_env = self._build_template_environment()
        self.fastmail = fastmail if fastmail is not None else self._build_smtp_client()

        logger.info(
            "otp_email_service_initialized",
            test_mode=self.is_test_mode(),
            smtp_configured=bool(config.EMAIL_SMTP_USERNAME),
        )

    def is_test_mode(self) -> bool:
        return bool(self.config.EMAIL_TEST_MODE)

    @property
    def templates_dir(self) -> Path:
        return Path(self.config.EMAIL_TEMPLATES_DIR) if self.config.EMAIL_TEMPLATES_DIR else DEFAULT_TEMPLATES_DIR

    def _build_template_environment(self) -> Environment:
        return Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def _build_smtp_client(self) -> Optional[FastMail]:
        if self.is_test_mode():
            logger.info("otp_email_test_mode", detail="emails will be logged, not sent")
            return None

        password = self.config.EMAIL_SMTP_PASSWORD
        try:
            connection = ConnectionConfig(
                MAIL_USERNAME=self.config.EMAIL_SMTP_USERNAME or "",
                MAIL_PASSWORD=password.get_secret_value() if password else "",
                MAIL_FROM=self.config.EMAIL_FROM_EMAIL,
                MAIL_FROM_NAME=self.config.EMAIL_FROM_NAME,
                MAIL_PORT=self.config.EMAIL_SMTP_PORT,
                MAIL_SERVER=self.config.EMAIL_SMTP_HOST,
                MAIL_STARTTLS=self.config.EMAIL_SMTP_USE_TLS,
                MAIL_SSL_TLS=self.config.EMAIL_SMTP_USE_SSL,
                USE_CREDENTIALS=bool(self.config.EMAIL_SMTP_USERNAME and password),
                VALIDATE_CERTS=True,
            )
        except ValueError as exc:
            logger.error("otp_email_smtp_config_invalid", error=str(exc))
            raise EmailServiceError(f"Failed to configure email service: {exc}") from exc
        return FastMail(connection)

    def render(self, code: str, language: str = "en") -> Tuple[str, str]:
        """Renders the HTML and plain-text bodies for `code`.

        Raises:
            TemplateRenderError: If a template is missing or fails to render.
        """
        context = self._template_context(code, language)
        return (
            self._render_template(OTP_HTML_TEMPLATE, context),
            self._render_template(OTP_TEXT_TEMPLATE, context),
        )

    def _template_context(self, code: str, language: str) -> Dict[str, Any]:
        return {
            "code": code,
            "language": language,
            "subject": self.config.EMAIL_OTP_SUBJECT,
            "app_name": self.config.PROJECT_NAME,
            "expires_minutes": max(self.config.OTP_TTL_SECONDS // 60, 1),
        }

    def _render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        try:
            return self.jinja_env.get_template(template_name).render(**context)
        except TemplateNotFound as exc:
            logger.error("email_template_not_found", template=template_name)
            raise TemplateRenderError(f"Template file not found: {template_name}") from exc
        except TemplateError as exc:
            logger.error("email_template_render_failed", template=template_name, error=str(exc))
            raise TemplateRenderError(f"Template rendering failed: {exc}") from exc

    async def send_otp_email(self, to_email: str, code: str, language: str = "en") -> bool:
        html_body, text_body = self.render(code, language)
        subject = self.config.EMAIL_OTP_SUBJECT

        if self.is_test_mode():
            logger.info(
                "otp_email_logged",
                to_email=mask_email(to_email),
                subject=subject,
                html_length=len(html_body),
            )
            return True

        if self.fastmail is None:
            raise EmailServiceError("FastMail not configured for production mode")

        message = MessageSchema(
            subject=subject,
            recipients=[to_email],
            body=html_body,
            alternative_body=text_body,
            subtype=MessageType.html,
            multipart_subtype=MultipartSubtypeEnum.alternative,
        )

        try:
            await self.fastmail.send_message(message)
        except Exception as exc:
            logger.error("otp_email_send_failed", to_email=mask_email(to_email), error=str(exc))
            raise EmailServiceError(f"Failed to send email: {exc}") from exc

        logger.info("otp_email_sent", to_email=mask_email(to_email))
        return True
