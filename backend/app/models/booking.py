# backend/app/models/booking.py
"""
Booking model for CoachConnect.

A booking is an ensemble's request for a coaching session. It moves through
a small state machine owned by BookingService:

    pending -> accepted -> completed
    pending -> declined

declined and completed are terminal. completed_at is set exactly when the
booking reaches completed.
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Index, JSON, Numeric, String, Text
from sqlalchemy.orm import relationship

from ..database import Base
from ..core.ulid_helper import generate_ulid
from .base_enum import create_safe_enum


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    COMPLETED = "completed"


TERMINAL_BOOKING_STATUSES = frozenset({BookingStatus.DECLINED, BookingStatus.COMPLETED})


class SessionType(str, Enum):
    """Length of the booked session; selects the coach's rate."""

    HOURLY = "hourly"
    HALF_DAY = "half_day"
    FULL_DAY = "full_day"


class SessionFormat(str, Enum):
    IN_PERSON = "in_person"
    VIRTUAL = "virtual"


class Booking(Base):
    """
    Coaching session request between an ensemble and a coach.

    Rate and total cost are snapshotted from the coach profile at creation.
    """

    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    ensemble_id = Column(
        String(26), ForeignKey("ensemble_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    coach_id = Column(String(26), ForeignKey("coach_profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    status = Column(
        create_safe_enum(BookingStatus, "booking_status"),
        nullable=False,
        default=BookingStatus.PENDING,
    )

    # ISO dates proposed by the ensemble, in preference order
    proposed_dates = Column(JSON, nullable=False, default=list)
    confirmed_date = Column(Date, nullable=True)

    session_type = Column(create_safe_enum(SessionType, "booking_session_type"), nullable=False)
    session_format = Column(
        create_safe_enum(SessionFormat, "session_format"),
        nullable=False,
        default=SessionFormat.IN_PERSON,
    )
    rate = Column(Numeric(10, 2), nullable=False, default=0)
    total_cost = Column(Numeric(10, 2), nullable=False, default=0)

    goals = Column(Text, nullable=True)
    special_requests = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    completed_at = Column(DateTime(timezone=True), nullable=True)

    coach = relationship("CoachProfile", back_populates="bookings")
    ensemble = relationship("EnsembleProfile", back_populates="bookings")

    __table_args__ = (
        CheckConstraint(
            "(status = 'completed') = (completed_at IS NOT NULL)",
            name="ck_bookings_completed_at_matches_status",
        ),
        Index("idx_bookings_coach_status", "coach_id", "status"),
        Index("idx_bookings_ensemble_status", "ensemble_id", "status"),
        Index("idx_bookings_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking {self.id} {self.status}>"

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_BOOKING_STATUSES
