"""
Centralized email subject builders.

Keep subjects in code (not templates) for versioning, logging,
and future i18n. Bodies remain in Jinja templates.
"""

from app.core.constants import BRAND_NAME


class EmailSubject:
    """Utility class with static builders for email subjects."""

    @staticmethod
    def review_invite(coach_name: str) -> str:
        safe_name = (coach_name or "").strip() or "Your coach"
        return f"{safe_name} would like your review on {BRAND_NAME}"
