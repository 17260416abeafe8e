from datetime import datetime, timedelta, timezone
from fractions import Fraction
from types import SimpleNamespace

import pytest

from app.services.ratings_config import RatingsConfig
from app.services.ratings_math import (
    compute_latest_per_rater_rating,
    latest_per_rater,
    mean_rating,
    newest_first,
    round_half_up,
)

BASE = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _review(rid, reviewer, rating, days):
    return SimpleNamespace(id=rid, reviewer_id=reviewer, rating=rating, created_at=BASE + timedelta(days=days))


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (Fraction(9, 2), 4.5),
            (Fraction(14, 3), 4.7),
            (Fraction(89, 20), 4.5),  # 4.45 rounds up, not to even
            (Fraction(13, 3), 4.3),
            (Fraction(5), 5.0),
        ],
    )
    def test_rounds_half_up_to_one_decimal(self, value, expected):
        assert round_half_up(value, 1) == expected


class TestMeanRating:
    def test_empty_is_zero(self):
        assert mean_rating([]) == 0.0

    def test_two_ratings(self):
        assert mean_rating([5, 4]) == 4.5

    def test_three_ratings(self):
        assert mean_rating([5, 5, 4]) == 4.7

    def test_custom_empty_rating(self):
        assert mean_rating([], RatingsConfig(empty_rating=3.0)) == 3.0


class TestLatestPerRater:
    def test_newest_first_breaks_ties_by_id(self):
        a = _review("01A", "r1", 5, 0)
        b = _review("01B", "r2", 4, 0)
        assert [r.id for r in newest_first([a, b])] == ["01B", "01A"]

    def test_keeps_only_newest_review_per_reviewer(self):
        reviews = [
            _review("1", "ens-a", 2, 0),
            _review("2", "ens-a", 5, 10),
            _review("3", "ens-b", 4, 5),
        ]
        kept = latest_per_rater(reviews)
        assert sorted(r.id for r in kept) == ["2", "3"]

    def test_naive_timestamps_compare_as_utc(self):
        older = SimpleNamespace(id="1", reviewer_id="x", rating=1, created_at=datetime(2026, 1, 1))
        newer = SimpleNamespace(id="2", reviewer_id="x", rating=5, created_at=BASE + timedelta(hours=1))
        assert latest_per_rater([older, newer])[0].id == "2"


def test_aggregate_counts_one_vote_per_reviewer():
    reviews = [
        _review("1", "ens-a", 1, 0),
        _review("2", "ens-a", 5, 1),
        _review("3", "ens-b", 4, 2),
    ]
    assert compute_latest_per_rater_rating(reviews) == {"rating": 4.5, "total_reviews": 2}


def test_aggregate_of_nothing():
    assert compute_latest_per_rater_rating([]) == {"rating": 0.0, "total_reviews": 0}
