from __future__ import annotations

from datetime import datetime, timezone
from fractions import Fraction
from math import floor
from typing import Any, Iterable, List

from .ratings_config import DEFAULT_RATINGS_CONFIG, RatingsConfig

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _as_utc(value: Any) -> datetime:
    if value is None:
        return _EPOCH
    if getattr(value, "tzinfo", None) is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def newest_first(
    reviews: Iterable[Any],
    *,
    created_at_attr: str = "created_at",
    id_attr: str = "id",
) -> List[Any]:
    """Order by creation time descending; ids (ULIDs) break ties."""
    return sorted(
        reviews,
        key=lambda r: (_as_utc(getattr(r, created_at_attr, None)), str(getattr(r, id_attr, "") or "")),
        reverse=True,
    )


def latest_per_rater(
    reviews: Iterable[Any],
    *,
    rater_attr: str = "reviewer_id",
    created_at_attr: str = "created_at",
) -> List[Any]:
    """
    Keep only the most recent review of each rater.

    Older submissions by the same rater are dropped from the result (they stay
    in storage, they just don't count).
    """
    seen: set[Any] = set()
    kept: List[Any] = []
    for review in newest_first(reviews, created_at_attr=created_at_attr):
        rater = getattr(review, rater_attr)
        if rater in seen:
            continue
        seen.add(rater)
        kept.append(review)
    return kept


def round_half_up(value: Fraction, decimals: int = 1) -> float:
    """Round an exact rational half-up (4.45 -> 4.5, never banker's rounding)."""
    scale = 10**decimals
    return floor(value * scale + Fraction(1, 2)) / scale


def mean_rating(ratings: Iterable[int], config: RatingsConfig = DEFAULT_RATINGS_CONFIG) -> float:
    values = [int(r) for r in ratings]
    if not values:
        return config.empty_rating
    return round_half_up(Fraction(sum(values), len(values)), config.decimals)


def compute_latest_per_rater_rating(
    reviews: Iterable[Any],
    *,
    rater_attr: str = "reviewer_id",
    rating_attr: str = "rating",
    created_at_attr: str = "created_at",
    config: RatingsConfig = DEFAULT_RATINGS_CONFIG,
) -> dict[str, float | int]:
    """
    Aggregate a subject's reviews: one vote per rater (their latest), mean
    rounded half-up to ``config.decimals``.
    """
    kept = latest_per_rater(reviews, rater_attr=rater_attr, created_at_attr=created_at_attr)
    return {
        "rating": mean_rating((getattr(r, rating_attr) for r in kept), config),
        "total_reviews": len(kept),
    }
