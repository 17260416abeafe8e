# backend/app/repositories/booking_repository.py
"""
Booking repository.

Status transitions go through BaseRepository.update_if_status so two
requests racing on the same booking cannot both win.
"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking, BookingStatus
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Data access for `Booking`."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def get_with_parties(self, booking_id: str) -> Optional[Booking]:
        """Booking with coach and ensemble eagerly loaded."""
        try:
            return (
                self.db.query(Booking)
                .options(joinedload(Booking.coach), joinedload(Booking.ensemble))
                .filter(Booking.id == booking_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading booking {booking_id}: {e}")
            raise RepositoryException(f"Failed to load booking: {e}")

    def list_for_coach(self, coach_id: str, status: Optional[BookingStatus] = None) -> List[Booking]:
        query = self.db.query(Booking).filter(Booking.coach_id == coach_id)
        if status is not None:
            query = query.filter(Booking.status == status)
        return self._execute_query(query.order_by(Booking.created_at.desc(), Booking.id.desc()))

    def list_for_ensembles(
        self, ensemble_ids: Sequence[str], status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        if not ensemble_ids:
            return []
        query = self.db.query(Booking).filter(Booking.ensemble_id.in_(list(ensemble_ids)))
        if status is not None:
            query = query.filter(Booking.status == status)
        return self._execute_query(query.order_by(Booking.created_at.desc(), Booking.id.desc()))

    def has_completed_booking(self, ensemble_id: str, coach_id: str) -> bool:
        return self.exists(ensemble_id=ensemble_id, coach_id=coach_id, status=BookingStatus.COMPLETED)
