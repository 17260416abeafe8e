from datetime import datetime, timezone
from unittest.mock import MagicMock

from app.services.email import ConsoleEmailService
from app.services.notification_service import NotificationKind, NotificationService

PAYLOAD = {
    "coach_name": "Maria Lopez",
    "ensemble_name": "Riverside Brass",
    "invite_url": "http://localhost:3000/reviews/invite/abc123",
    "expires_at": datetime(2026, 6, 1, tzinfo=timezone.utc),
}


def test_renders_and_sends_review_invite():
    email_service = MagicMock()
    service = NotificationService(email_service=email_service)

    assert service.send("brass@example.com", NotificationKind.REVIEW_INVITE, PAYLOAD) is True

    kwargs = email_service.send_email.call_args.kwargs
    assert kwargs["to_email"] == "brass@example.com"
    assert kwargs["subject"] == "Maria Lopez would like your review on CoachConnect"
    html = kwargs["html_content"]
    assert "http://localhost:3000/reviews/invite/abc123" in html
    assert "June 1, 2026" in html
    assert "brass@example.com" in html


def test_provider_failure_returns_false():
    email_service = MagicMock()
    email_service.send_email.side_effect = RuntimeError("smtp down")
    service = NotificationService(email_service=email_service)

    assert service.send("brass@example.com", "review_invite", PAYLOAD) is False


def test_console_provider_is_the_default():
    assert isinstance(NotificationService().email_service, ConsoleEmailService)
