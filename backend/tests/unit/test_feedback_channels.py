from types import SimpleNamespace

import pytest

from app.core.exceptions import ValidationException
from app.services.feedback import COACH_REVIEWS, ENSEMBLE_FEEDBACK, AggregationPolicy


@pytest.mark.parametrize("channel", [COACH_REVIEWS, ENSEMBLE_FEEDBACK])
@pytest.mark.parametrize("rating", [1, 3, 5])
def test_accepts_ratings_in_range(channel, rating):
    channel.validate(rating, "Lovely phrasing work")


@pytest.mark.parametrize("channel", [COACH_REVIEWS, ENSEMBLE_FEEDBACK])
@pytest.mark.parametrize("rating", [0, 6, -1, 4.5, "5", True, None])
def test_rejects_bad_ratings(channel, rating):
    with pytest.raises(ValidationException) as exc:
        channel.validate(rating)
    assert exc.value.code == "INVALID_RATING"
    assert exc.value.status_code == 400


def test_rejects_overlong_text():
    with pytest.raises(ValidationException) as exc:
        COACH_REVIEWS.validate(5, "x" * (COACH_REVIEWS.max_text_length + 1))
    assert exc.value.code == "TEXT_TOO_LONG"


def test_text_at_limit_is_fine():
    ENSEMBLE_FEEDBACK.validate(4, "x" * ENSEMBLE_FEEDBACK.max_text_length)


def test_channels_name_their_parties():
    assert COACH_REVIEWS.subject_attr == "coach_profile_id"
    assert COACH_REVIEWS.rater_attr == "reviewer_id"
    assert ENSEMBLE_FEEDBACK.subject_attr == "ensemble_profile_id"
    assert ENSEMBLE_FEEDBACK.rater_attr == "coach_profile_id"


def test_ensemble_feedback_publishes_no_aggregate():
    assert ENSEMBLE_FEEDBACK.policy is AggregationPolicy.NONE
    entries = [SimpleNamespace(id="1", coach_profile_id="c", rating=5, created_at=None)]
    assert ENSEMBLE_FEEDBACK.aggregate(entries) is None


def test_coach_reviews_aggregate_latest_per_reviewer():
    assert COACH_REVIEWS.aggregate([]) == {"rating": 0.0, "total_reviews": 0}
