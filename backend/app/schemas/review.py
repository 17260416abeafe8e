# backend/app/schemas/review.py
from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.functional_validators import field_validator

from ..models.booking import SessionFormat
from .base import StandardizedModel, StrictModel


class ReviewPayload(StrictModel):
    """Fields shared by invite redemption and direct submission."""

    # Range and length checks live in the feedback channel so they surface as 400s
    rating: int
    review_text: Optional[str] = None
    session_month: Optional[int] = None
    session_year: Optional[int] = None
    session_format: Optional[SessionFormat] = None

    @field_validator("review_text")
    @classmethod
    def _clean_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class ReviewSubmitRequest(ReviewPayload):
    coach_profile_id: str
    ensemble_profile_id: Optional[str] = None


class ReviewerSummary(StandardizedModel):
    id: str
    ensemble_name: str
    ensemble_type: Optional[str] = None


class ReviewItem(StandardizedModel):
    id: str
    coach_profile_id: str
    reviewer_id: str
    rating: int
    review_text: Optional[str] = None
    session_month: Optional[int] = None
    session_year: Optional[int] = None
    session_format: Optional[SessionFormat] = None
    created_at: datetime
    reviewer: Optional[ReviewerSummary] = None


class ReviewListResponse(BaseModel):
    reviews: List[ReviewItem]


class CoachRatingResponse(BaseModel):
    coach_profile_id: str
    rating: float
    total_reviews: int


class EnsembleReviewEligibility(BaseModel):
    status: Literal["eligible", "no_booking", "cooldown"]
    cooldown_until: Optional[str] = None


class ReviewStatusResponse(BaseModel):
    status: Literal["ok", "no_ensemble"]
    ensembles: Dict[str, EnsembleReviewEligibility] = Field(default_factory=dict)
