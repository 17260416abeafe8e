# backend/app/schemas/review_invite.py
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from ..core.constants import MAX_ENSEMBLE_NAME_LENGTH
from ..models.review_invite import ReviewInviteStatus
from .base import StandardizedModel, StrictModel


class ReviewInviteCreate(StrictModel):
    ensemble_email: EmailStr
    ensemble_name: Optional[str] = Field(None, max_length=MAX_ENSEMBLE_NAME_LENGTH)
    ensemble_profile_id: Optional[str] = None

    @field_validator("ensemble_email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class CoachSummary(StandardizedModel):
    id: str
    full_name: str
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    photo_url: Optional[str] = None


class ReviewInviteResponse(StandardizedModel):
    """Invite as seen by its recipient (the token is never echoed to third parties)."""

    id: str
    coach_profile_id: str
    ensemble_email: str
    ensemble_name: Optional[str] = None
    ensemble_profile_id: Optional[str] = None
    status: ReviewInviteStatus
    expires_at: datetime
    created_at: datetime
    responded_at: Optional[datetime] = None
    coach: Optional[CoachSummary] = None


class IssuedReviewInviteResponse(ReviewInviteResponse):
    """Returned to the issuing coach, who may share the link manually."""

    token: str


class ReviewInviteListResponse(StandardizedModel):
    invites: List[ReviewInviteResponse]
