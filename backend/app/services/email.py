# backend/app/services/email.py
"""
Email Service for CoachConnect

Sends email through the Resend API. ConsoleEmailService is the drop-in used
when EMAIL_PROVIDER=console (local development and tests); it logs instead
of sending.
"""

import logging
import re
from typing import Any, Dict, Optional, Union

import resend
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import ServiceException
from .base import BaseService

logger = logging.getLogger(__name__)


class EmailService(BaseService):
    """Service for sending emails using Resend API."""

    def __init__(self, db: Optional[Session] = None, api_key: Optional[str] = None):
        super().__init__(db)

        api_key = api_key or settings.resend_api_key
        if not api_key:
            raise ServiceException("Resend API key not configured")

        resend.api_key = api_key
        self.from_email = settings.from_email
        self.logger.info("EmailService initialized successfully")

    @staticmethod
    def _html_to_text(html_content: str) -> str:
        """Convert HTML content to plain text for better deliverability"""
        text = re.sub(r"<[^>]+>", "", html_content)
        return re.sub(r"\s+", " ", text).strip()

    @BaseService.measure_operation("send_email")
    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Send an email using Resend.

        Returns:
            Dict containing the Resend API response

        Raises:
            ServiceException: If email sending fails
        """
        email_data = {
            "from": self.from_email,
            "to": to_email,
            "subject": subject,
            "html": html_content,
            "text": text_content or self._html_to_text(html_content),
        }
        try:
            response = resend.Emails.send(email_data)
        except Exception as e:
            self.logger.error(f"Failed to send email to {to_email}: {type(e).__name__}: {e}")
            raise ServiceException(f"Failed to send email: {e}") from e

        self.log_operation("email_sent", to_email=to_email, subject=subject)
        return response


class ConsoleEmailService(BaseService):
    """Email service that only logs; used when no real provider is configured."""

    @BaseService.measure_operation("send_email")
    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        self.logger.info(f"[console email] to={to_email} subject={subject!r} ({len(html_content)} bytes)")
        return {"id": "console", "to": to_email}


def get_email_service(db: Optional[Session] = None) -> Union[EmailService, ConsoleEmailService]:
    """Pick the provider named by EMAIL_PROVIDER."""
    if settings.email_provider == "resend":
        return EmailService(db)
    return ConsoleEmailService(db)
