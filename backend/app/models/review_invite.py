# backend/app/models/review_invite.py
"""
Review invite model.

A coach invites an ensemble, by email, to review them. The token is the
only credential the recipient needs besides being signed in with the
invited address. Status leaves pending exactly once and is never reopened.
The stored 'expired' status is a write-back cache; expiry is decided from
expires_at (see services.review_invite_service.effective_invite_status).
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from ..database import Base
from ..core.ulid_helper import generate_ulid
from .base_enum import create_safe_enum


class ReviewInviteStatus(str, Enum):
    PENDING = "pending"
    DECLINED = "declined"
    EXPIRED = "expired"
    ACCEPTED = "accepted"


class ReviewInvite(Base):
    """Coach-issued invitation for an ensemble to leave a review."""

    __tablename__ = "review_invites"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    token = Column(String(64), nullable=False, unique=True, index=True)

    coach_profile_id = Column(
        String(26), ForeignKey("coach_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Always stored lower-cased
    ensemble_email = Column(String(320), nullable=False, index=True)
    ensemble_name = Column(String(200), nullable=True)
    ensemble_profile_id = Column(
        String(26), ForeignKey("ensemble_profiles.id", ondelete="SET NULL"), nullable=True
    )

    status = Column(
        create_safe_enum(ReviewInviteStatus, "review_invite_status"),
        nullable=False,
        default=ReviewInviteStatus.PENDING,
    )
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    responded_at = Column(DateTime(timezone=True), nullable=True)

    coach = relationship("CoachProfile")

    __table_args__ = (
        Index("idx_review_invites_coach_created", "coach_profile_id", "created_at"),
        Index("idx_review_invites_email_status", "ensemble_email", "status"),
    )

    def __repr__(self) -> str:
        return f"<ReviewInvite {self.id} {self.ensemble_email} {self.status}>"
