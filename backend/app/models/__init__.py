"""
Database models for CoachConnect.

This module exports all SQLAlchemy models used in the application:
- Coach and ensemble profiles
- Bookings
- Coach reviews and review invites
- Coach -> ensemble session feedback
"""

from .booking import Booking, BookingStatus, SessionFormat, SessionType
from .ensemble_review import EnsembleReview, EnsembleReviewStatus
from .profile import CoachProfile, EnsembleProfile
from .review import Review
from .review_invite import ReviewInvite, ReviewInviteStatus

__all__ = [
    "Booking",
    "BookingStatus",
    "CoachProfile",
    "EnsembleProfile",
    "EnsembleReview",
    "EnsembleReviewStatus",
    "Review",
    "ReviewInvite",
    "ReviewInviteStatus",
    "SessionFormat",
    "SessionType",
]
