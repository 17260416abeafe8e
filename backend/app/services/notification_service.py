# backend/app/services/notification_service.py
"""
Notification Service for CoachConnect

Fire-and-forget outbound messages. send() renders the template for the
notification kind and hands it to the configured email provider. Delivery
failures are logged and counted but never raised: a notification that fails
must not undo the business operation that triggered it.
"""

from enum import Enum
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Union

from sqlalchemy.orm import Session

from ..monitoring.prometheus_metrics import prometheus_metrics
from .base import BaseService
from .email import ConsoleEmailService, EmailService, get_email_service
from .email_subjects import EmailSubject
from .template_registry import TemplateRegistry
from .template_service import TemplateService

logger = logging.getLogger(__name__)


class NotificationKind(str, Enum):
    REVIEW_INVITE = "review_invite"


_TEMPLATES: Dict[NotificationKind, TemplateRegistry] = {
    NotificationKind.REVIEW_INVITE: TemplateRegistry.REVIEW_INVITE,
}

_SUBJECTS: Dict[NotificationKind, Callable[[Mapping[str, Any]], str]] = {
    NotificationKind.REVIEW_INVITE: lambda p: EmailSubject.review_invite(p.get("coach_name", "")),
}


class NotificationService(BaseService):
    """Outbound notification gateway."""

    def __init__(
        self,
        db: Optional[Session] = None,
        template_service: Optional[TemplateService] = None,
        email_service: Optional[Union[EmailService, ConsoleEmailService]] = None,
    ):
        super().__init__(db)
        self.template_service = template_service or TemplateService(db)
        self._email_service = email_service

    @property
    def email_service(self) -> Union[EmailService, ConsoleEmailService]:
        # Built lazily so a missing provider key only matters when mail is sent
        if self._email_service is None:
            self._email_service = get_email_service(self.db)
        return self._email_service

    @BaseService.measure_operation("send_notification")
    def send(self, to_email: str, kind: NotificationKind, payload: Mapping[str, Any]) -> bool:
        """
        Render and deliver one notification.

        Returns:
            True when the provider accepted the message, False otherwise.
        """
        kind = NotificationKind(kind)
        try:
            html = self.template_service.render_template(
                _TEMPLATES[kind], {**payload, "recipient_email": to_email}
            )
            subject = _SUBJECTS[kind](payload)
            self.email_service.send_email(to_email=to_email, subject=subject, html_content=html)
        except Exception as e:
            self.logger.error(f"Failed to send {kind.value} notification to {to_email}: {e}")
            prometheus_metrics.inc_notification(kind.value, "failed")
            return False

        self.logger.info(f"Sent {kind.value} notification to {to_email}")
        prometheus_metrics.inc_notification(kind.value, "sent")
        return True
