# backend/app/services/session_review_service.py
"""
Session Review Service for CoachConnect

Coach -> ensemble feedback. A completed booking leaves the coach with a
pending obligation to rate the ensemble; submitting it moves the row to
completed for good.
"""

from datetime import datetime
import logging
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import ForbiddenException, InvalidStateException, NotFoundException
from ..core.timezone_utils import utc_now
from ..models.booking import Booking
from ..models.ensemble_review import EnsembleReview, EnsembleReviewStatus
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import CallerContext
from ..repositories.ensemble_review_repository import EnsembleReviewRepository
from .base import BaseService
from .feedback import ENSEMBLE_FEEDBACK, FeedbackChannel

logger = logging.getLogger(__name__)


def ensemble_public_fields(review: EnsembleReview) -> Dict[str, Any]:
    ensemble = review.ensemble
    if ensemble is None:
        return {}
    return {
        "id": ensemble.id,
        "ensemble_name": ensemble.ensemble_name,
        "ensemble_type": ensemble.ensemble_type,
        "city": ensemble.city,
        "state": ensemble.state,
        "country": ensemble.country,
    }


class SessionReviewService(BaseService):
    """Pending and completed coach feedback about ensembles."""

    def __init__(
        self,
        db: Session,
        channel: FeedbackChannel = ENSEMBLE_FEEDBACK,
        *,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__(db)
        self.channel = channel
        self.repository = EnsembleReviewRepository(db)
        self.clock = clock

    @BaseService.measure_operation("open_session_review")
    def open_obligation(self, booking: Booking) -> EnsembleReview:
        """
        Create the pending feedback row for a completed booking.

        Idempotent: a booking never gets a second obligation.
        """
        with self.transaction():
            existing = self.repository.get_for_booking(booking.id)
            if existing:
                return existing

            session_date = booking.confirmed_date or booking.completed_at or self.clock()
            review = self.repository.create(
                coach_profile_id=booking.coach_id,
                ensemble_profile_id=booking.ensemble_id,
                booking_id=booking.id,
                session_month=session_date.month,
                session_year=session_date.year,
                session_format=booking.session_format,
                status=EnsembleReviewStatus.PENDING,
            )

        self.log_operation("open_session_review", booking_id=booking.id, ensemble_review_id=review.id)
        return review

    @BaseService.measure_operation("list_pending_session_reviews")
    def list_pending(self, caller: CallerContext) -> List[EnsembleReview]:
        """The caller's outstanding obligations, newest first."""
        if not caller.is_coach:
            raise ForbiddenException("Coach profile required")
        return self.repository.list_pending_for_coach(caller.coach_profile_id)

    def count_pending(self, caller: CallerContext) -> int:
        if not caller.is_coach:
            return 0
        return self.repository.count_pending_for_coach(caller.coach_profile_id)

    @BaseService.measure_operation("submit_session_review")
    def submit(
        self,
        caller: CallerContext,
        ensemble_review_id: str,
        *,
        rating: int,
        feedback_text: Optional[str] = None,
    ) -> EnsembleReview:
        """
        Record the coach's rating of the ensemble (pending -> completed).

        Raises:
            NotFoundException: No such obligation
            ForbiddenException: Caller is not the coach it belongs to
            InvalidStateException: Already submitted
            ValidationException: Rating or text out of range
        """
        self.channel.validate(rating, feedback_text)

        with self.transaction():
            review = self.repository.get_by_id(ensemble_review_id)
            if not review:
                raise NotFoundException("Review not found", code="SESSION_REVIEW_NOT_FOUND")
            if not caller.owns_coach_profile(review.coach_profile_id):
                raise ForbiddenException("Forbidden")
            if review.status != EnsembleReviewStatus.PENDING:
                raise InvalidStateException(
                    "This review has already been submitted",
                    current_status=EnsembleReviewStatus(review.status).value,
                )
            changed = self.repository.complete(
                ensemble_review_id,
                rating=rating,
                feedback_text=feedback_text,
                completed_at=self.clock(),
            )
            if not changed:
                raise InvalidStateException(
                    "This review has already been submitted",
                    current_status=EnsembleReviewStatus.COMPLETED.value,
                )

        self.repository.refresh(review)
        prometheus_metrics.inc_review_submitted("session")
        self.log_operation("submit_session_review", ensemble_review_id=ensemble_review_id)
        return review

    @BaseService.measure_operation("list_ensemble_feedback")
    def list_feedback_for_ensemble(self, ensemble_profile_id: str) -> List[EnsembleReview]:
        """Completed feedback an ensemble has received, newest first."""
        return self.repository.list_completed_for_ensemble(ensemble_profile_id)
