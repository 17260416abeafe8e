# backend/app/models/ensemble_review.py
"""
Coach -> ensemble session feedback.

A row is created in the pending state when a booking completes (an
obligation for the coach) and moves to completed once the coach submits a
rating. Completed rows are never reopened.
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import Base
from ..core.ulid_helper import generate_ulid
from .base_enum import create_safe_enum
from .booking import SessionFormat


class EnsembleReviewStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class EnsembleReview(Base):
    """Coach feedback about an ensemble for one session."""

    __tablename__ = "ensemble_reviews"

    id = Column(String(26), primary_key=True, default=generate_ulid)

    coach_profile_id = Column(
        String(26), ForeignKey("coach_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ensemble_profile_id = Column(
        String(26), ForeignKey("ensemble_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # One obligation per booking
    booking_id = Column(String(26), ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True, unique=True)

    session_month = Column(Integer, nullable=True)
    session_year = Column(Integer, nullable=True)
    session_format = Column(create_safe_enum(SessionFormat, "session_format"), nullable=True)

    status = Column(
        create_safe_enum(EnsembleReviewStatus, "ensemble_review_status"),
        nullable=False,
        default=EnsembleReviewStatus.PENDING,
    )
    rating = Column(Integer, nullable=True)
    feedback_text = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    completed_at = Column(DateTime(timezone=True), nullable=True)

    ensemble = relationship("EnsembleProfile")

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_ensemble_reviews_rating_range"),
        Index("idx_ensemble_reviews_coach_status", "coach_profile_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<EnsembleReview {self.id} {self.status}>"
