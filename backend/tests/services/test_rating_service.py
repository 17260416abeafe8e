from datetime import timedelta

import pytest

from app.core.exceptions import NotFoundException
from app.models.review import Review
from app.services.rating_service import RatingService
from tests.factories import T0, make_ensemble


def _review(db, coach, reviewer, rating, days):
    db.add(Review(coach_profile_id=coach.id, reviewer_id=reviewer.id, rating=rating, created_at=T0 + timedelta(days=days)))
    db.commit()


def test_no_reviews_means_zero(db, coach):
    service = RatingService(db)
    assert service.recompute(coach.id) == {"rating": 0.0, "total_reviews": 0}
    assert service.get_coach_rating(coach.id) == {"coach_profile_id": coach.id, "rating": 0.0, "total_reviews": 0}


def test_mean_of_latest_reviews_rounded_half_up(db, coach, ensemble):
    choir = make_ensemble(db, user_id="choir-user", ensemble_name="Choir")
    band = make_ensemble(db, user_id="band-user", ensemble_name="Band")
    _review(db, coach, ensemble, 1, 0)
    _review(db, coach, ensemble, 5, 400)  # supersedes the 1
    _review(db, coach, choir, 5, 1)
    _review(db, coach, band, 4, 2)

    result = RatingService(db).recompute(coach.id)

    assert result == {"rating": 4.7, "total_reviews": 3}
    db.refresh(coach)
    assert (coach.rating, coach.total_reviews) == (4.7, 3)


def test_recompute_is_stable(db, coach, ensemble):
    _review(db, coach, ensemble, 4, 0)
    service = RatingService(db)
    assert service.recompute(coach.id) == service.recompute(coach.id)


def test_unknown_coach(db):
    with pytest.raises(NotFoundException):
        RatingService(db).get_coach_rating("missing")
