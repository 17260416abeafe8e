# backend/app/schemas/booking.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_GOALS_LENGTH
from ..models.booking import BookingStatus, SessionFormat, SessionType
from .base import Money, StandardizedModel, StrictModel


class BookingCreate(StrictModel):
    coach_id: str
    ensemble_profile_id: Optional[str] = None
    proposed_dates: List[date] = Field(..., min_length=1)
    session_type: SessionType
    session_format: SessionFormat = SessionFormat.IN_PERSON
    goals: Optional[str] = Field(None, max_length=MAX_GOALS_LENGTH)
    special_requests: Optional[str] = Field(None, max_length=MAX_GOALS_LENGTH)

    @field_validator("goals", "special_requests")
    @classmethod
    def _strip(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class BookingResponse(StandardizedModel):
    id: str
    ensemble_id: str
    coach_id: str
    status: BookingStatus
    proposed_dates: List[date]
    confirmed_date: Optional[date] = None
    session_type: SessionType
    session_format: SessionFormat
    rate: Money
    total_cost: Money
    goals: Optional[str] = None
    special_requests: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class BookingListResponse(StandardizedModel):
    bookings: List[BookingResponse]
    total: int
