# backend/app/repositories/profile_repository.py
"""
Repositories for coach and ensemble profiles.

Profiles are looked up by account id to build the caller context; the
booking and rating flows also update the derived counters on CoachProfile.
"""

import logging
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.profile import CoachProfile, EnsembleProfile
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CoachProfileRepository(BaseRepository[CoachProfile]):
    """Data access for `CoachProfile`."""

    def __init__(self, db: Session):
        super().__init__(db, CoachProfile)

    def get_by_user_id(self, user_id: str) -> Optional[CoachProfile]:
        return self.find_one_by(user_id=user_id)

    def set_rating(self, coach_profile_id: str, rating: float, total_reviews: int) -> None:
        """Overwrite the cached rating aggregate."""
        try:
            self.db.execute(
                update(CoachProfile)
                .where(CoachProfile.id == coach_profile_id)
                .values(rating=rating, total_reviews=total_reviews)
                .execution_options(synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error writing rating for coach {coach_profile_id}: {e}")
            raise RepositoryException(f"Failed to update coach rating: {e}")

    def increment_total_bookings(self, coach_profile_id: str) -> None:
        # Done in SQL so concurrent accepts don't lose increments
        try:
            self.db.execute(
                update(CoachProfile)
                .where(CoachProfile.id == coach_profile_id)
                .values(total_bookings=CoachProfile.total_bookings + 1)
                .execution_options(synchronize_session="fetch")
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error incrementing bookings for coach {coach_profile_id}: {e}")
            raise RepositoryException(f"Failed to update coach booking count: {e}")


class EnsembleProfileRepository(BaseRepository[EnsembleProfile]):
    """Data access for `EnsembleProfile`."""

    def __init__(self, db: Session):
        super().__init__(db, EnsembleProfile)

    def list_by_user_id(self, user_id: str) -> List[EnsembleProfile]:
        """All ensembles managed by an account, oldest first (the first is the default)."""
        try:
            return (
                self.db.query(EnsembleProfile)
                .filter(EnsembleProfile.user_id == user_id)
                .order_by(EnsembleProfile.created_at.asc(), EnsembleProfile.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing ensembles for user {user_id}: {e}")
            raise RepositoryException(f"Failed to list ensembles: {e}")
