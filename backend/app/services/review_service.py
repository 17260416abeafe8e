# backend/app/services/review_service.py
"""
Review Service for CoachConnect

Direct (non-invite) coach reviews. An ensemble that has completed a session
with a coach may review them, and may leave an updated review once the
cooldown since its previous one has passed. Only the newest review per
ensemble counts toward the published rating.
"""

from datetime import datetime, timedelta
import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import (
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.review import Review
from ..principal import CallerContext
from ..repositories.booking_repository import BookingRepository
from ..repositories.profile_repository import CoachProfileRepository
from ..repositories.review_repository import ReviewRepository
from .base import BaseService
from .feedback import COACH_REVIEWS, FeedbackChannel
from .rating_service import RatingService
from .review_invite_service import validate_session_metadata

logger = logging.getLogger(__name__)

DAYS_PER_MONTH = 30


class ReviewService(BaseService):
    """Direct review submission and public review listing."""

    def __init__(
        self,
        db: Session,
        rating_service: Optional[RatingService] = None,
        channel: FeedbackChannel = COACH_REVIEWS,
        *,
        cooldown_days: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__(db)
        self.repository = ReviewRepository(db)
        self.booking_repository = BookingRepository(db)
        self.coach_repository = CoachProfileRepository(db)
        self.rating_service = rating_service or RatingService(db, channel)
        self.channel = channel
        self.cooldown = timedelta(days=settings.review_cooldown_days if cooldown_days is None else cooldown_days)
        self.clock = clock

    def _cooldown_ends(self, coach_profile_id: str, reviewer_id: str) -> Optional[datetime]:
        """When the reviewer may review this coach again, or None if they may now."""
        latest = self.repository.latest_by_reviewer(coach_profile_id, reviewer_id)
        if not latest:
            return None
        ends = ensure_utc(latest.created_at) + self.cooldown
        return ends if ends > ensure_utc(self.clock()) else None

    @BaseService.measure_operation("submit_review")
    def submit_review(
        self,
        caller: CallerContext,
        *,
        coach_profile_id: str,
        ensemble_profile_id: Optional[str] = None,
        rating: int,
        review_text: Optional[str] = None,
        session_month: Optional[int] = None,
        session_year: Optional[int] = None,
        session_format: Optional[str] = None,
    ) -> Review:
        """
        Write a review from one of the caller's ensembles.

        Raises:
            ForbiddenException: Caller does not manage the ensemble
            NotFoundException: Coach does not exist
            ValidationException: Coach not approved, own coach profile, or bad payload
            InvalidStateException: No completed booking, or still in cooldown
        """
        reviewer_id = ensemble_profile_id or caller.default_ensemble_id
        if not caller.owns_ensemble(reviewer_id):
            raise ForbiddenException("Ensemble profile required to submit reviews")
        self.channel.validate(rating, review_text)
        fmt = validate_session_metadata(session_month, session_year, session_format)

        now = self.clock()
        with self.transaction():
            coach = self.coach_repository.get_by_id(coach_profile_id)
            if not coach:
                raise NotFoundException("Coach not found", code="COACH_NOT_FOUND")
            if not coach.approved:
                raise ValidationException("This coach profile is not yet approved", code="COACH_NOT_APPROVED")
            if caller.owns_coach_profile(coach.id):
                raise ValidationException("You cannot review yourself", code="SELF_REVIEW")
            if not self.booking_repository.has_completed_booking(reviewer_id, coach.id):
                raise InvalidStateException(
                    "You can only review a coach after completing a session with them",
                    details={"reason": "no_completed_booking"},
                )

            cooldown_ends = self._cooldown_ends(coach.id, reviewer_id)
            if cooldown_ends:
                months = max(1, -(-(cooldown_ends - ensure_utc(now)).days // DAYS_PER_MONTH))
                raise InvalidStateException(
                    f"You can submit an updated review in {months} month{'s' if months != 1 else ''}",
                    details={"reason": "cooldown", "cooldown_until": cooldown_ends.isoformat()},
                )

            review = self.repository.create_review(
                coach_profile_id=coach.id,
                reviewer_id=reviewer_id,
                rating=rating,
                review_text=review_text,
                session_month=session_month,
                session_year=session_year,
                session_format=fmt,
                created_at=now,
            )

        self.log_operation("submit_review", review_id=review.id, coach_id=coach_profile_id)
        self.rating_service.recompute_after_review(coach_profile_id, source="direct")
        return review

    @BaseService.measure_operation("list_coach_reviews")
    def list_reviews_for_coach(self, coach_profile_id: str) -> List[Review]:
        if not self.coach_repository.get_by_id(coach_profile_id):
            raise NotFoundException("Coach not found", code="COACH_NOT_FOUND")
        return self.repository.list_for_coach_newest_first(coach_profile_id)

    @BaseService.measure_operation("get_review_status")
    def get_review_status(self, caller: CallerContext, coach_profile_id: str) -> Dict[str, Any]:
        """
        Per-ensemble eligibility to review a coach right now.

        Returns {"status": "no_ensemble"} for callers without ensembles, else
        {"status": "ok", "ensembles": {id: {"status": ..., "cooldown_until": ...}}}.
        """
        if not caller.has_ensembles:
            return {"status": "no_ensemble", "ensembles": {}}

        statuses: Dict[str, Dict[str, Optional[str]]] = {}
        for ensemble_id in caller.ensemble_profile_ids:
            if not self.booking_repository.has_completed_booking(ensemble_id, coach_profile_id):
                statuses[ensemble_id] = {"status": "no_booking", "cooldown_until": None}
                continue
            cooldown_ends = self._cooldown_ends(coach_profile_id, ensemble_id)
            if cooldown_ends:
                statuses[ensemble_id] = {"status": "cooldown", "cooldown_until": cooldown_ends.isoformat()}
            else:
                statuses[ensemble_id] = {"status": "eligible", "cooldown_until": None}
        return {"status": "ok", "ensembles": statuses}
