# backend/app/repositories/review_repository.py
"""
Repository for coach reviews.

Follows repository pattern: no business logic, DB-only operations.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.review import Review
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    """Data access for `Review`."""

    def __init__(self, db: Session):
        super().__init__(db, Review)

    def create_review(self, **kwargs: Any) -> Review:
        return self.create(**kwargs)

    def list_for_coach_newest_first(self, coach_profile_id: str) -> List[Review]:
        """
        Every review row for a coach, newest first.

        Ties on created_at are broken by id (ULIDs sort by creation time), so the
        order is total and the latest-per-reviewer pick is deterministic.
        """
        try:
            return (
                self.db.query(Review)
                .options(joinedload(Review.reviewer))
                .filter(Review.coach_profile_id == coach_profile_id)
                .order_by(Review.created_at.desc(), Review.id.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing reviews for coach {coach_profile_id}: {e}")
            raise RepositoryException(f"Failed to list reviews: {e}")

    def latest_by_reviewer(self, coach_profile_id: str, reviewer_id: str) -> Optional[Review]:
        try:
            return (
                self.db.query(Review)
                .filter(Review.coach_profile_id == coach_profile_id, Review.reviewer_id == reviewer_id)
                .order_by(Review.created_at.desc(), Review.id.desc())
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading latest review by {reviewer_id}: {e}")
            raise RepositoryException(f"Failed to load review: {e}")
