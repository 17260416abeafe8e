from datetime import date
from decimal import Decimal

import pytest

from app.api.dependencies.auth import build_caller_context
from app.core.exceptions import (
    ForbiddenException,
    InvalidStateException,
    NotFoundException,
    ValidationException,
)
from app.models.booking import BookingStatus
from app.models.ensemble_review import EnsembleReview, EnsembleReviewStatus
from app.services.booking_service import BookingService
from tests.factories import T0, make_booking, make_coach, make_ensemble


@pytest.fixture
def service(db, clock):
    return BookingService(db, clock=clock)


class TestCreateBooking:
    def test_creates_pending_booking_with_rate_snapshot(self, service, ensemble_caller, coach):
        booking = service.create_booking(
            ensemble_caller,
            coach_id=coach.id,
            proposed_dates=[date(2026, 4, 10), "2026-04-17"],
            session_type="half_day",
            session_format="virtual",
            goals="Tighten intonation in the chorale",
        )

        assert booking.status == BookingStatus.PENDING
        assert booking.ensemble_id == ensemble_caller.default_ensemble_id
        assert booking.proposed_dates == ["2026-04-10", "2026-04-17"]
        assert booking.rate == Decimal("400.00")
        assert booking.total_cost == Decimal("400.00")
        assert booking.completed_at is None

    def test_requires_an_ensemble(self, service, coach_caller, coach):
        with pytest.raises(ForbiddenException):
            service.create_booking(coach_caller, coach_id=coach.id, proposed_dates=["2026-04-10"], session_type="hourly")

    def test_cannot_book_for_someone_elses_ensemble(self, db, service, ensemble_caller, coach):
        other = make_ensemble(db, user_id="other-user", ensemble_name="Other Choir")
        with pytest.raises(ForbiddenException):
            service.create_booking(
                ensemble_caller,
                coach_id=coach.id,
                proposed_dates=["2026-04-10"],
                session_type="hourly",
                ensemble_profile_id=other.id,
            )

    def test_needs_a_proposed_date(self, service, ensemble_caller, coach):
        with pytest.raises(ValidationException) as exc:
            service.create_booking(ensemble_caller, coach_id=coach.id, proposed_dates=[], session_type="hourly")
        assert exc.value.code == "NO_PROPOSED_DATES"

    def test_rejects_malformed_date(self, service, ensemble_caller, coach):
        with pytest.raises(ValidationException):
            service.create_booking(ensemble_caller, coach_id=coach.id, proposed_dates=["soon"], session_type="hourly")

    def test_unknown_coach(self, service, ensemble_caller):
        with pytest.raises(NotFoundException):
            service.create_booking(ensemble_caller, coach_id="nope", proposed_dates=["2026-04-10"], session_type="hourly")


class TestAccessAndListing:
    def test_parties_can_read_strangers_cannot(self, db, service, coach, ensemble, coach_caller, ensemble_caller, stranger_caller):
        booking = make_booking(db, coach, ensemble)
        assert service.get_booking(booking.id, coach_caller).id == booking.id
        assert service.get_booking(booking.id, ensemble_caller).id == booking.id
        with pytest.raises(ForbiddenException):
            service.get_booking(booking.id, stranger_caller)

    def test_missing_booking(self, service, coach_caller):
        with pytest.raises(NotFoundException):
            service.get_booking("missing", coach_caller)

    def test_list_by_role_and_status(self, db, service, coach, ensemble, coach_caller, ensemble_caller):
        pending = make_booking(db, coach, ensemble)
        make_booking(db, coach, ensemble, status=BookingStatus.DECLINED)

        assert len(service.list_bookings(ensemble_caller)) == 2
        assert [b.id for b in service.list_bookings(coach_caller, role="coach", status="pending")] == [pending.id]

    def test_list_rejects_unknown_role_and_status(self, service, coach_caller):
        with pytest.raises(ValidationException):
            service.list_bookings(coach_caller, role="admin")
        with pytest.raises(ValidationException):
            service.list_bookings(coach_caller, status="cancelled")

    def test_list_without_profiles(self, service, stranger_caller):
        with pytest.raises(NotFoundException):
            service.list_bookings(stranger_caller)


class TestTransitions:
    def test_accept_confirms_first_date_and_counts_booking(self, db, service, coach, ensemble, coach_caller):
        booking = make_booking(db, coach, ensemble)

        accepted = service.accept_booking(booking.id, coach_caller)

        assert accepted.status == BookingStatus.ACCEPTED
        assert accepted.confirmed_date == date(2026, 4, 10)
        db.refresh(coach)
        assert coach.total_bookings == 1

    def test_decline_is_terminal(self, db, service, coach, ensemble, coach_caller):
        booking = make_booking(db, coach, ensemble)
        service.decline_booking(booking.id, coach_caller)

        with pytest.raises(InvalidStateException) as exc:
            service.accept_booking(booking.id, coach_caller)
        assert exc.value.details["current_status"] == "declined"
        assert "Only pending bookings can be accepted" in exc.value.message

    def test_complete_requires_accepted(self, db, service, coach, ensemble, coach_caller):
        booking = make_booking(db, coach, ensemble)
        with pytest.raises(InvalidStateException) as exc:
            service.complete_booking(booking.id, coach_caller)
        assert exc.value.message == "Only accepted bookings can be marked as completed (current status: pending)"

    def test_complete_stamps_completed_at(self, db, service, coach, ensemble, coach_caller, clock):
        booking = make_booking(db, coach, ensemble, status=BookingStatus.ACCEPTED)

        completed = service.complete_booking(booking.id, coach_caller)

        assert completed.status == BookingStatus.COMPLETED
        assert completed.completed_at.replace(tzinfo=None) == T0.replace(tzinfo=None)

    @pytest.mark.parametrize(
        "action, start_status",
        [
            ("accept_booking", BookingStatus.PENDING),
            ("decline_booking", BookingStatus.PENDING),
            ("complete_booking", BookingStatus.ACCEPTED),
        ],
    )
    def test_only_the_assigned_coach_may_act(
        self, db, service, coach, ensemble, ensemble_caller, action, start_status
    ):
        booking = make_booking(db, coach, ensemble, status=start_status)
        other_coach = make_coach(db, user_id="coach-2", full_name="Other Coach")
        other_caller = build_caller_context(db, other_coach.user_id, "other@example.com")

        for caller in (ensemble_caller, other_caller):
            with pytest.raises(ForbiddenException):
                getattr(service, action)(booking.id, caller)
        assert service.repository.get_current_status(booking.id) == start_status

    def test_unknown_booking(self, service, coach_caller):
        with pytest.raises(NotFoundException):
            service.accept_booking("missing", coach_caller)

    def test_concurrent_accept_and_decline_have_one_winner(self, db, other_db, coach, ensemble, coach_caller, clock):
        booking = make_booking(db, coach, ensemble)
        slow = BookingService(other_db, clock=clock)
        # The slow request has already read the booking while it was pending
        assert slow.repository.get_by_id(booking.id).status == BookingStatus.PENDING

        BookingService(db, clock=clock).accept_booking(booking.id, coach_caller)

        with pytest.raises(InvalidStateException) as exc:
            slow.decline_booking(booking.id, coach_caller)
        assert exc.value.details["current_status"] == "accepted"
        assert slow.repository.get_current_status(booking.id) == BookingStatus.ACCEPTED


class TestSessionReviewTrigger:
    def test_completion_opens_one_pending_obligation(self, db, coach, ensemble, coach_caller, clock):
        service = BookingService(db, session_review_trigger="on_completion", clock=clock)
        booking = make_booking(db, coach, ensemble, status=BookingStatus.ACCEPTED)

        service.complete_booking(booking.id, coach_caller)

        obligations = db.query(EnsembleReview).filter_by(booking_id=booking.id).all()
        assert len(obligations) == 1
        assert obligations[0].status == EnsembleReviewStatus.PENDING
        assert obligations[0].coach_profile_id == coach.id
        assert obligations[0].ensemble_profile_id == ensemble.id
        assert (obligations[0].session_month, obligations[0].session_year) == (4, 2026)

    def test_manual_trigger_opens_nothing(self, db, coach, ensemble, coach_caller, clock):
        service = BookingService(db, session_review_trigger="manual", clock=clock)
        booking = make_booking(db, coach, ensemble, status=BookingStatus.ACCEPTED)

        service.complete_booking(booking.id, coach_caller)

        assert db.query(EnsembleReview).count() == 0
