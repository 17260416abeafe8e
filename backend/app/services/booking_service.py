# backend/app/services/booking_service.py
"""
Booking Service for CoachConnect

Owns the booking state machine:

    pending --accept--> accepted --complete--> completed
    pending --decline--> declined

Only the coach a booking is addressed to may move it. Every transition is a
conditional update on the expected status, so when two requests race on the
same booking exactly one succeeds and the other gets InvalidStateException.
"""

from datetime import date, datetime
from decimal import Decimal
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from sqlalchemy.orm import Session

from ..core.config import SessionReviewTrigger, settings
from ..core.exceptions import (
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    ServiceException,
    ValidationException,
)
from ..core.timezone_utils import parse_iso_date, utc_now
from ..models.booking import Booking, BookingStatus, SessionFormat, SessionType
from ..models.profile import CoachProfile
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..principal import CallerContext
from ..repositories.booking_repository import BookingRepository
from ..repositories.profile_repository import CoachProfileRepository
from .base import BaseService
from .session_review_service import SessionReviewService

logger = logging.getLogger(__name__)

_RATE_COLUMNS: Dict[SessionType, str] = {
    SessionType.HOURLY: "rate_hourly",
    SessionType.HALF_DAY: "rate_half_day",
    SessionType.FULL_DAY: "rate_full_day",
}

_STATE_MESSAGES: Dict[BookingStatus, str] = {
    BookingStatus.ACCEPTED: "Only pending bookings can be accepted",
    BookingStatus.DECLINED: "Only pending bookings can be declined",
    BookingStatus.COMPLETED: "Only accepted bookings can be marked as completed",
}


def rate_for_session(coach: CoachProfile, session_type: SessionType) -> Decimal:
    """The coach's published rate for a session type (0 when unset)."""
    value = getattr(coach, _RATE_COLUMNS[session_type])
    return Decimal(value) if value is not None else Decimal("0")


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Handles creation, listing, access checks and the accept / decline /
    complete transitions.
    """

    def __init__(
        self,
        db: Session,
        session_review_service: Optional[SessionReviewService] = None,
        *,
        session_review_trigger: Optional[SessionReviewTrigger] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        super().__init__(db)
        self.repository = BookingRepository(db)
        self.coach_repository = CoachProfileRepository(db)
        self.session_review_service = session_review_service or SessionReviewService(db, clock=clock)
        self.session_review_trigger = session_review_trigger or settings.session_review_trigger
        self.clock = clock

    # ------------------------------------------------------------------
    # Creation and reads
    # ------------------------------------------------------------------

    @BaseService.measure_operation("create_booking")
    def create_booking(
        self,
        caller: CallerContext,
        *,
        coach_id: str,
        proposed_dates: Sequence[Union[str, date]],
        session_type: Union[SessionType, str],
        session_format: Union[SessionFormat, str] = SessionFormat.IN_PERSON,
        goals: Optional[str] = None,
        special_requests: Optional[str] = None,
        ensemble_profile_id: Optional[str] = None,
    ) -> Booking:
        """
        Create a pending booking request from one of the caller's ensembles.

        Raises:
            ForbiddenException: Caller has no ensemble, or names one they don't manage
            ValidationException: No proposed dates, or a date/enum is malformed
            NotFoundException: Coach does not exist
        """
        if not caller.has_ensembles:
            raise ForbiddenException("Only users with an ensemble profile can create bookings")
        if ensemble_profile_id is not None and not caller.owns_ensemble(ensemble_profile_id):
            raise ForbiddenException("You can only book on behalf of your own ensembles")
        ensemble_id = ensemble_profile_id or caller.default_ensemble_id

        dates = self._normalize_dates(proposed_dates)
        try:
            session_type = SessionType(session_type)
            session_format = SessionFormat(session_format)
        except ValueError as e:
            raise ValidationException(str(e), code="INVALID_SESSION") from e

        with self.transaction():
            coach = self.coach_repository.get_by_id(coach_id)
            if not coach:
                raise NotFoundException("Coach not found", code="COACH_NOT_FOUND")

            rate = rate_for_session(coach, session_type)
            booking = self.repository.create(
                ensemble_id=ensemble_id,
                coach_id=coach.id,
                status=BookingStatus.PENDING,
                proposed_dates=dates,
                session_type=session_type,
                session_format=session_format,
                rate=rate,
                total_cost=rate,
                goals=goals,
                special_requests=special_requests,
            )

        self.log_operation("create_booking", booking_id=booking.id, coach_id=coach_id)
        return booking

    @BaseService.measure_operation("get_booking")
    def get_booking(self, booking_id: str, caller: CallerContext) -> Booking:
        """
        Fetch a booking visible to the caller (its coach or any of the caller's ensembles).

        Raises:
            NotFoundException: Booking does not exist
            ForbiddenException: Caller is neither party
        """
        booking = self.repository.get_with_parties(booking_id)
        if not booking:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        if not (caller.owns_coach_profile(booking.coach_id) or caller.owns_ensemble(booking.ensemble_id)):
            raise ForbiddenException("You do not have access to this booking")
        return booking

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        caller: CallerContext,
        *,
        role: Optional[str] = None,
        status: Optional[Union[BookingStatus, str]] = None,
    ) -> List[Booking]:
        """
        Bookings the caller is party to, newest first.

        role="coach" or role="ensemble" picks a side explicitly; without it,
        ensemble bookings are listed when the caller manages any ensemble,
        then coach bookings.
        """
        try:
            status_filter = BookingStatus(status) if status is not None else None
        except ValueError as e:
            raise ValidationException(f"Unknown booking status: {status}", code="INVALID_STATUS") from e
        if role not in (None, "coach", "ensemble"):
            raise ValidationException("role must be 'coach' or 'ensemble'", code="INVALID_ROLE")

        if role == "coach" or (role is None and not caller.has_ensembles and caller.is_coach):
            if not caller.is_coach:
                raise NotFoundException("Coach profile not found", code="PROFILE_NOT_FOUND")
            return self.repository.list_for_coach(caller.coach_profile_id, status_filter)
        if caller.has_ensembles:
            return self.repository.list_for_ensembles(caller.ensemble_profile_ids, status_filter)
        raise NotFoundException("No profile found", code="PROFILE_NOT_FOUND")

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    @BaseService.measure_operation("accept_booking")
    def accept_booking(self, booking_id: str, caller: CallerContext) -> Booking:
        """
        pending -> accepted. Confirms the first proposed date and bumps the
        coach's booking count.
        """

        def values(booking: Booking) -> Dict[str, Any]:
            dates = booking.proposed_dates or []
            return {"confirmed_date": parse_iso_date(dates[0]) if dates else None}

        booking = self._transition(
            booking_id,
            caller,
            verb="accept",
            expected=BookingStatus.PENDING,
            target=BookingStatus.ACCEPTED,
            values=values,
            after_update=lambda b: self.coach_repository.increment_total_bookings(b.coach_id),
        )
        return booking

    @BaseService.measure_operation("decline_booking")
    def decline_booking(self, booking_id: str, caller: CallerContext) -> Booking:
        """pending -> declined (terminal)."""
        return self._transition(
            booking_id,
            caller,
            verb="decline",
            expected=BookingStatus.PENDING,
            target=BookingStatus.DECLINED,
        )

    @BaseService.measure_operation("complete_booking")
    def complete_booking(self, booking_id: str, caller: CallerContext) -> Booking:
        """
        accepted -> completed (terminal), stamping completed_at.

        When the session-review trigger is on_completion, the coach gets a
        pending feedback obligation for the ensemble once the booking commits.
        """
        now = self.clock()
        booking = self._transition(
            booking_id,
            caller,
            verb="complete",
            expected=BookingStatus.ACCEPTED,
            target=BookingStatus.COMPLETED,
            values=lambda _b: {"completed_at": now},
        )

        # External operations outside the booking transaction
        if self.session_review_trigger == "on_completion":
            try:
                self.session_review_service.open_obligation(booking)
            except ServiceException as exc:
                logger.error(
                    f"Failed to open session review for completed booking {booking.id}: {exc}"
                )
        return booking

    def _transition(
        self,
        booking_id: str,
        caller: CallerContext,
        *,
        verb: str,
        expected: BookingStatus,
        target: BookingStatus,
        values: Optional[Callable[[Booking], Dict[str, Any]]] = None,
        after_update: Optional[Callable[[Booking], None]] = None,
    ) -> Booking:
        with self.transaction():
            booking = self.repository.get_by_id(booking_id)
            if not booking:
                raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")

            if not caller.owns_coach_profile(booking.coach_id):
                raise ForbiddenException(f"Only the assigned coach can {verb} this booking")

            current = BookingStatus(booking.status)
            if current != expected:
                raise InvalidStateException(
                    f"{_STATE_MESSAGES[target]} (current status: {current.value})",
                    current_status=current.value,
                )

            extra = values(booking) if values else {}
            if not self.repository.update_if_status(booking_id, expected, status=target, **extra):
                latest = self.repository.get_current_status(booking_id)
                latest_value = getattr(latest, "value", latest)
                raise InvalidStateException(
                    f"{_STATE_MESSAGES[target]} (current status: {latest_value})",
                    current_status=latest_value,
                )
            if after_update:
                after_update(booking)

        self.repository.refresh(booking)
        prometheus_metrics.inc_booking_transition(target.value)
        self.log_operation(f"{verb}_booking", booking_id=booking_id, status=target.value)
        return booking

    @staticmethod
    def _normalize_dates(proposed_dates: Sequence[Union[str, date]]) -> List[str]:
        if not proposed_dates:
            raise ValidationException("At least one proposed date is required", code="NO_PROPOSED_DATES")
        normalized = []
        for value in proposed_dates:
            try:
                if isinstance(value, datetime):
                    parsed = value.date()
                elif isinstance(value, date):
                    parsed = value
                else:
                    parsed = parse_iso_date(str(value))
            except ValueError as e:
                raise ValidationException(f"Invalid proposed date: {value}", code="INVALID_DATE") from e
            normalized.append(parsed.isoformat())
        return normalized
