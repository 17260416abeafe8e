# backend/app/schemas/__init__.py
"""
Pydantic schemas for CoachConnect request and response bodies.
"""

from .booking import BookingCreate, BookingListResponse, BookingResponse
from .review import (
    CoachRatingResponse,
    ReviewItem,
    ReviewListResponse,
    ReviewPayload,
    ReviewStatusResponse,
    ReviewSubmitRequest,
)
from .review_invite import (
    IssuedReviewInviteResponse,
    ReviewInviteCreate,
    ReviewInviteListResponse,
    ReviewInviteResponse,
)
from .session_review import (
    PendingCountResponse,
    SessionReviewListResponse,
    SessionReviewResponse,
    SessionReviewSubmit,
)

__all__ = [
    "BookingCreate",
    "BookingListResponse",
    "BookingResponse",
    "CoachRatingResponse",
    "IssuedReviewInviteResponse",
    "PendingCountResponse",
    "ReviewInviteCreate",
    "ReviewInviteListResponse",
    "ReviewInviteResponse",
    "ReviewItem",
    "ReviewListResponse",
    "ReviewPayload",
    "ReviewStatusResponse",
    "ReviewSubmitRequest",
    "SessionReviewListResponse",
    "SessionReviewResponse",
    "SessionReviewSubmit",
]
