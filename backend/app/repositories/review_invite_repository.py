# backend/app/repositories/review_invite_repository.py
"""
Repository for review invites.

Status changes use the conditional update from BaseRepository; an invite
can leave pending at most once no matter how many requests race.
"""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.review_invite import ReviewInvite, ReviewInviteStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ReviewInviteRepository(BaseRepository[ReviewInvite]):
    """Data access for `ReviewInvite`."""

    def __init__(self, db: Session):
        super().__init__(db, ReviewInvite)

    def get_by_token(self, token: str) -> Optional[ReviewInvite]:
        return self.find_one_by(token=token)

    def list_for_coach(self, coach_profile_id: str) -> List[ReviewInvite]:
        query = (
            self.db.query(ReviewInvite)
            .filter(ReviewInvite.coach_profile_id == coach_profile_id)
            .order_by(ReviewInvite.created_at.desc(), ReviewInvite.id.desc())
        )
        return self._execute_query(query)

    def list_live_for_email(self, email: str, now: datetime) -> List[ReviewInvite]:
        """Pending invites addressed to ``email`` that have not passed expires_at."""
        query = (
            self.db.query(ReviewInvite)
            .filter(
                ReviewInvite.ensemble_email == email.lower(),
                ReviewInvite.status == ReviewInviteStatus.PENDING,
                ReviewInvite.expires_at >= now,
            )
            .order_by(ReviewInvite.created_at.desc(), ReviewInvite.id.desc())
        )
        return self._execute_query(query)

    def find_live_for_coach_and_email(
        self, coach_profile_id: str, email: str, now: datetime
    ) -> Optional[ReviewInvite]:
        try:
            return (
                self.db.query(ReviewInvite)
                .filter(
                    ReviewInvite.coach_profile_id == coach_profile_id,
                    ReviewInvite.ensemble_email == email.lower(),
                    ReviewInvite.status == ReviewInviteStatus.PENDING,
                    ReviewInvite.expires_at >= now,
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking live invites for coach {coach_profile_id}: {e}")
            raise RepositoryException(f"Failed to check existing invites: {e}")

    def transition(
        self,
        invite_id: str,
        to_status: ReviewInviteStatus,
        responded_at: Optional[datetime] = None,
    ) -> bool:
        """Move a pending invite to ``to_status``. False if it was no longer pending."""
        values = {"status": to_status}
        if responded_at is not None:
            values["responded_at"] = responded_at
        return self.update_if_status(invite_id, ReviewInviteStatus.PENDING, **values)
