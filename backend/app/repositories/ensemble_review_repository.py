# backend/app/repositories/ensemble_review_repository.py
"""
Repository for coach -> ensemble session feedback.
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from ..models.ensemble_review import EnsembleReview, EnsembleReviewStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class EnsembleReviewRepository(BaseRepository[EnsembleReview]):
    """Data access for `EnsembleReview`."""

    def __init__(self, db: Session):
        super().__init__(db, EnsembleReview)

    def get_for_booking(self, booking_id: str) -> Optional[EnsembleReview]:
        return self.find_one_by(booking_id=booking_id)

    def list_pending_for_coach(self, coach_profile_id: str) -> List[EnsembleReview]:
        query = (
            self.db.query(EnsembleReview)
            .options(joinedload(EnsembleReview.ensemble))
            .filter(
                EnsembleReview.coach_profile_id == coach_profile_id,
                EnsembleReview.status == EnsembleReviewStatus.PENDING,
            )
            .order_by(EnsembleReview.created_at.desc(), EnsembleReview.id.desc())
        )
        return self._execute_query(query)

    def count_pending_for_coach(self, coach_profile_id: str) -> int:
        return self.count(coach_profile_id=coach_profile_id, status=EnsembleReviewStatus.PENDING)

    def list_completed_for_ensemble(self, ensemble_profile_id: str) -> List[EnsembleReview]:
        query = (
            self.db.query(EnsembleReview)
            .filter(
                EnsembleReview.ensemble_profile_id == ensemble_profile_id,
                EnsembleReview.status == EnsembleReviewStatus.COMPLETED,
            )
            .order_by(EnsembleReview.completed_at.desc(), EnsembleReview.id.desc())
        )
        return self._execute_query(query)

    def complete(
        self,
        ensemble_review_id: str,
        *,
        rating: int,
        feedback_text: Optional[str],
        completed_at: datetime,
    ) -> bool:
        """pending -> completed with the coach's feedback. False if no longer pending."""
        return self.update_if_status(
            ensemble_review_id,
            EnsembleReviewStatus.PENDING,
            status=EnsembleReviewStatus.COMPLETED,
            rating=rating,
            feedback_text=feedback_text,
            completed_at=completed_at,
        )
