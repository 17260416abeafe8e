# backend/app/services/rating_service.py
"""
Coach rating aggregation.

CoachProfile.rating and CoachProfile.total_reviews are a cache derived from
the reviews table. This service is the only writer; every review insert is
followed by recompute() for the affected coach.
"""

import logging
from typing import Dict, Union

from sqlalchemy.orm import Session

from ..core.exceptions import NotFoundException
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.profile_repository import CoachProfileRepository
from ..repositories.review_repository import ReviewRepository
from .base import BaseService
from .feedback import COACH_REVIEWS, FeedbackChannel

logger = logging.getLogger(__name__)


class RatingService(BaseService):
    """Recomputes and reads the published coach rating."""

    def __init__(self, db: Session, channel: FeedbackChannel = COACH_REVIEWS):
        super().__init__(db)
        self.channel = channel
        self.review_repository = ReviewRepository(db)
        self.coach_repository = CoachProfileRepository(db)

    @BaseService.measure_operation("recompute_rating")
    def recompute(self, coach_profile_id: str) -> Dict[str, Union[float, int]]:
        """
        Rebuild the coach's cached aggregate from all stored reviews.

        Only the newest review per reviewer counts. Persisted before returning.
        """
        with self.transaction():
            reviews = self.review_repository.list_for_coach_newest_first(coach_profile_id)
            aggregate = self.channel.aggregate(reviews) or {"rating": 0.0, "total_reviews": 0}
            self.coach_repository.set_rating(
                coach_profile_id,
                rating=float(aggregate["rating"]),
                total_reviews=int(aggregate["total_reviews"]),
            )

        self.logger.info(
            "Recomputed %s aggregate for %s=%s: rating=%s total_reviews=%s (from %d rows)",
            self.channel.name,
            self.channel.subject_attr,
            coach_profile_id,
            aggregate["rating"],
            aggregate["total_reviews"],
            len(reviews),
        )
        return aggregate

    def recompute_after_review(self, coach_profile_id: str, source: str) -> Dict[str, Union[float, int]]:
        """Called right after a review row is committed."""
        prometheus_metrics.inc_review_submitted(source)
        return self.recompute(coach_profile_id)

    @BaseService.measure_operation("get_coach_rating")
    def get_coach_rating(self, coach_profile_id: str) -> Dict[str, Union[float, int]]:
        coach = self.coach_repository.get_by_id(coach_profile_id)
        if not coach:
            raise NotFoundException("Coach not found", code="COACH_NOT_FOUND")
        return {
            "coach_profile_id": coach.id,
            "rating": float(coach.rating or 0.0),
            "total_reviews": int(coach.total_reviews or 0),
        }
