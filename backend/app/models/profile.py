# backend/app/models/profile.py
"""
Coach and ensemble profile models for CoachConnect.

Profile field editing, search and photo upload live in other services; this
module only carries what the booking and reputation flows read or write.
The rating columns on CoachProfile are a cache owned by RatingService.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, Integer, Numeric, String
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base


class CoachProfile(Base):
    """Public profile of a coach, one per account."""

    __tablename__ = "coach_profiles"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    user_id = Column(String(64), nullable=False, unique=True, index=True)

    full_name = Column(String(200), nullable=False)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    photo_url = Column(String(500), nullable=True)

    # Rates per session type; unset means the coach has not published one
    rate_hourly = Column(Numeric(10, 2), nullable=True)
    rate_half_day = Column(Numeric(10, 2), nullable=True)
    rate_full_day = Column(Numeric(10, 2), nullable=True)
    currency = Column(String(3), nullable=False, default="USD")
    approved = Column(Boolean, nullable=False, default=False)

    # Derived aggregates (written only by RatingService / BookingService)
    rating = Column(Float, nullable=False, default=0.0)
    total_reviews = Column(Integer, nullable=False, default=0)
    total_bookings = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    bookings = relationship("Booking", back_populates="coach", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_coach_profiles_rating_range"),
        CheckConstraint("total_reviews >= 0", name="ck_coach_profiles_total_reviews"),
    )

    def __repr__(self) -> str:
        return f"<CoachProfile {self.id} {self.full_name!r} rating={self.rating}>"


class EnsembleProfile(Base):
    """
    A performing group. One account may manage several ensembles.
    """

    __tablename__ = "ensemble_profiles"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    user_id = Column(String(64), nullable=False, index=True)

    ensemble_name = Column(String(200), nullable=False)
    ensemble_type = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    size = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    bookings = relationship("Booking", back_populates="ensemble", passive_deletes=True)

    def __repr__(self) -> str:
        return f"<EnsembleProfile {self.id} {self.ensemble_name!r}>"
