"""Compare-and-set status updates are what keep concurrent transitions single-winner."""

from datetime import timedelta

from app.models.booking import Booking, BookingStatus
from app.models.review_invite import ReviewInvite, ReviewInviteStatus
from app.repositories.booking_repository import BookingRepository
from app.repositories.profile_repository import CoachProfileRepository
from app.repositories.review_invite_repository import ReviewInviteRepository
from tests.factories import T0, make_booking


def _invite(db, coach, **overrides):
    values = dict(
        token="tok-" + overrides.pop("suffix", "1"),
        coach_profile_id=coach.id,
        ensemble_email="brass@example.com",
        status=ReviewInviteStatus.PENDING,
        expires_at=T0 + timedelta(days=90),
        created_at=T0,
    )
    values.update(overrides)
    invite = ReviewInvite(**values)
    db.add(invite)
    db.commit()
    return invite


class TestUpdateIfStatus:
    def test_applies_when_status_matches(self, db, coach, ensemble):
        booking = make_booking(db, coach, ensemble)
        repo = BookingRepository(db)

        assert repo.update_if_status(booking.id, BookingStatus.PENDING, status=BookingStatus.DECLINED)
        db.commit()
        assert repo.get_current_status(booking.id) == BookingStatus.DECLINED

    def test_second_writer_loses(self, db, other_db, coach, ensemble):
        booking = make_booking(db, coach, ensemble)

        first = BookingRepository(db)
        second = BookingRepository(other_db)
        assert first.update_if_status(booking.id, BookingStatus.PENDING, status=BookingStatus.ACCEPTED)
        db.commit()

        assert not second.update_if_status(booking.id, BookingStatus.PENDING, status=BookingStatus.DECLINED)
        other_db.commit()
        assert second.get_current_status(booking.id) == BookingStatus.ACCEPTED

    def test_missing_row_reports_no_change(self, db):
        repo = BookingRepository(db)
        assert not repo.update_if_status("01HZZZZZZZZZZZZZZZZZZZZZZZ", BookingStatus.PENDING, status=BookingStatus.ACCEPTED)
        assert repo.get_current_status("01HZZZZZZZZZZZZZZZZZZZZZZZ") is None


class TestInviteTransition:
    def test_only_leaves_pending_once(self, db, coach):
        invite = _invite(db, coach)
        repo = ReviewInviteRepository(db)

        assert repo.transition(invite.id, ReviewInviteStatus.DECLINED, responded_at=T0)
        db.commit()
        assert not repo.transition(invite.id, ReviewInviteStatus.ACCEPTED, responded_at=T0)
        assert repo.get_current_status(invite.id) == ReviewInviteStatus.DECLINED

    def test_live_listing_excludes_expired_and_answered(self, db, coach):
        live = _invite(db, coach, suffix="live")
        _invite(db, coach, suffix="old", expires_at=T0 - timedelta(days=1))
        _invite(db, coach, suffix="done", status=ReviewInviteStatus.DECLINED)
        _invite(db, coach, suffix="other", ensemble_email="someone@example.com")

        found = ReviewInviteRepository(db).list_live_for_email("Brass@Example.com", T0)
        assert [i.id for i in found] == [live.id]


class TestCoachAggregates:
    def test_set_rating_and_increment_bookings(self, db, coach):
        repo = CoachProfileRepository(db)
        repo.set_rating(coach.id, rating=4.5, total_reviews=2)
        repo.increment_total_bookings(coach.id)
        repo.increment_total_bookings(coach.id)
        db.commit()

        db.refresh(coach)
        assert coach.rating == 4.5
        assert coach.total_reviews == 2
        assert coach.total_bookings == 2


class TestBookingQueries:
    def test_has_completed_booking(self, db, coach, ensemble):
        repo = BookingRepository(db)
        make_booking(db, coach, ensemble, status=BookingStatus.ACCEPTED)
        assert not repo.has_completed_booking(ensemble.id, coach.id)

        make_booking(db, coach, ensemble, status=BookingStatus.COMPLETED)
        assert repo.has_completed_booking(ensemble.id, coach.id)

    def test_lists_filter_by_status(self, db, coach, ensemble):
        pending = make_booking(db, coach, ensemble)
        make_booking(db, coach, ensemble, status=BookingStatus.DECLINED)
        repo = BookingRepository(db)

        assert [b.id for b in repo.list_for_coach(coach.id, BookingStatus.PENDING)] == [pending.id]
        assert len(repo.list_for_ensembles([ensemble.id])) == 2
        assert db.query(Booking).count() == 2
