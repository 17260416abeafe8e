# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.
"""

from .auth import get_current_caller
from .database import get_db
from .services import (
    get_booking_service,
    get_notification_service,
    get_rating_service,
    get_review_invite_service,
    get_review_service,
    get_session_review_service,
)

__all__ = [
    "get_current_caller",
    "get_db",
    "get_booking_service",
    "get_notification_service",
    "get_rating_service",
    "get_review_invite_service",
    "get_review_service",
    "get_session_review_service",
]
