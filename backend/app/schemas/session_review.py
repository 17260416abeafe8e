# backend/app/schemas/session_review.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from ..models.booking import SessionFormat
from ..models.ensemble_review import EnsembleReviewStatus
from .base import StandardizedModel, StrictModel


class SessionReviewSubmit(StrictModel):
    rating: int
    feedback_text: Optional[str] = None

    @field_validator("feedback_text")
    @classmethod
    def _clean_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class EnsemblePublicProfile(StandardizedModel):
    id: str
    ensemble_name: str
    ensemble_type: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class SessionReviewResponse(StandardizedModel):
    id: str
    coach_profile_id: str
    ensemble_profile_id: str
    booking_id: Optional[str] = None
    session_month: Optional[int] = None
    session_year: Optional[int] = None
    session_format: Optional[SessionFormat] = None
    status: EnsembleReviewStatus
    rating: Optional[int] = None
    feedback_text: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    ensemble: Optional[EnsemblePublicProfile] = None


class SessionReviewListResponse(StandardizedModel):
    reviews: List[SessionReviewResponse]


class PendingCountResponse(BaseModel):
    count: int
