# backend/app/models/review.py
"""
Coach review model for CoachConnect.

Design notes:
- ULID string IDs everywhere (26 chars)
- Timezone-aware timestamps
- Reviews are immutable once written; a reviewer may leave several over time
  and only the newest one per reviewer counts toward the coach's rating
- invite_id links a review to the invite it redeemed (at most one review per invite)
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import Base
from ..core.ulid_helper import generate_ulid
from .base_enum import create_safe_enum
from .booking import SessionFormat


class Review(Base):
    """Ensemble -> coach review."""

    __tablename__ = "reviews"

    id = Column(String(26), primary_key=True, default=generate_ulid)

    coach_profile_id = Column(
        String(26), ForeignKey("coach_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    reviewer_id = Column(
        String(26), ForeignKey("ensemble_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    invite_id = Column(
        String(26), ForeignKey("review_invites.id", ondelete="SET NULL"), nullable=True, unique=True
    )

    rating = Column(Integer, nullable=False)
    review_text = Column(Text, nullable=True)

    session_month = Column(Integer, nullable=True)
    session_year = Column(Integer, nullable=True)
    session_format = Column(create_safe_enum(SessionFormat, "session_format"), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    reviewer = relationship("EnsembleProfile")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        CheckConstraint(
            "session_month IS NULL OR (session_month >= 1 AND session_month <= 12)",
            name="ck_reviews_session_month",
        ),
        Index("idx_reviews_coach_created", "coach_profile_id", "created_at"),
        Index("idx_reviews_coach_reviewer", "coach_profile_id", "reviewer_id"),
    )

    def __repr__(self) -> str:
        return f"<Review {self.id} coach={self.coach_profile_id} rating={self.rating}>"
