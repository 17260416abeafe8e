# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

Each request gets fresh service instances bound to its own session.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.booking_service import BookingService
from ...services.notification_service import NotificationService
from ...services.rating_service import RatingService
from ...services.review_invite_service import ReviewInviteService
from ...services.review_service import ReviewService
from ...services.session_review_service import SessionReviewService
from .database import get_db

logger = logging.getLogger(__name__)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_rating_service(db: Session = Depends(get_db)) -> RatingService:
    return RatingService(db)


def get_session_review_service(db: Session = Depends(get_db)) -> SessionReviewService:
    return SessionReviewService(db)


def get_booking_service(
    db: Session = Depends(get_db),
    session_review_service: SessionReviewService = Depends(get_session_review_service),
) -> BookingService:
    return BookingService(db, session_review_service)


def get_review_invite_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
    rating_service: RatingService = Depends(get_rating_service),
) -> ReviewInviteService:
    return ReviewInviteService(db, notification_service, rating_service)


def get_review_service(
    db: Session = Depends(get_db),
    rating_service: RatingService = Depends(get_rating_service),
) -> ReviewService:
    return ReviewService(db, rating_service)
