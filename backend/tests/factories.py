# backend/tests/factories.py
"""Row builders and a settable clock shared by the test modules."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from app.auth import create_access_token
from app.models.booking import Booking, BookingStatus, SessionFormat, SessionType
from app.models.profile import CoachProfile, EnsembleProfile

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FrozenClock:
    """Settable clock for services that take ``clock=``."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


def make_coach(db: Session, user_id: str = "coach-user", **overrides) -> CoachProfile:
    values = dict(
        user_id=user_id,
        full_name="Maria Lopez",
        city="Austin",
        state="TX",
        country="US",
        rate_hourly=Decimal("120.00"),
        rate_half_day=Decimal("400.00"),
        rate_full_day=Decimal("700.00"),
        approved=True,
    )
    values.update(overrides)
    coach = CoachProfile(**values)
    db.add(coach)
    db.commit()
    return coach


def make_ensemble(db: Session, user_id: str = "ensemble-user", **overrides) -> EnsembleProfile:
    values = dict(
        user_id=user_id,
        ensemble_name="Riverside Brass Quintet",
        ensemble_type="brass_quintet",
        city="Austin",
        state="TX",
        country="US",
        size=5,
    )
    values.update(overrides)
    ensemble = EnsembleProfile(**values)
    db.add(ensemble)
    db.commit()
    return ensemble


def make_booking(
    db: Session,
    coach: CoachProfile,
    ensemble: EnsembleProfile,
    status: BookingStatus = BookingStatus.PENDING,
    **overrides,
) -> Booking:
    values = dict(
        coach_id=coach.id,
        ensemble_id=ensemble.id,
        status=status,
        proposed_dates=["2026-04-10", "2026-04-17"],
        session_type=SessionType.HOURLY,
        session_format=SessionFormat.IN_PERSON,
        rate=Decimal("120.00"),
        total_cost=Decimal("120.00"),
    )
    if status in (BookingStatus.ACCEPTED, BookingStatus.COMPLETED):
        values["confirmed_date"] = date(2026, 4, 10)
    if status == BookingStatus.COMPLETED:
        values["completed_at"] = T0 - timedelta(days=1)
    values.update(overrides)
    booking = Booking(**values)
    db.add(booking)
    db.commit()
    return booking


def auth_headers_for(user_id: str, email: str) -> dict:
    token = create_access_token(data={"sub": user_id, "email": email})
    return {"Authorization": f"Bearer {token}"}
