# backend/app/services/feedback.py
"""
Rated-party feedback channels.

Both directions of feedback in the marketplace (ensemble -> coach reviews and
coach -> ensemble session feedback) are the same capability with different
parameters: which attribute names the rated party, which names the rater,
and how (or whether) ratings roll up into a published aggregate.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

from ..core.constants import MAX_REVIEW_TEXT_LENGTH
from ..core.exceptions import ValidationException
from .ratings_config import DEFAULT_RATINGS_CONFIG, RatingsConfig
from .ratings_math import compute_latest_per_rater_rating


class AggregationPolicy(str, Enum):
    LATEST_PER_RATER = "latest_per_rater"
    NONE = "none"


@dataclass(frozen=True)
class FeedbackChannel:
    name: str
    subject_attr: str
    rater_attr: str
    policy: AggregationPolicy
    max_text_length: int = MAX_REVIEW_TEXT_LENGTH
    config: RatingsConfig = field(default=DEFAULT_RATINGS_CONFIG)

    def validate(self, rating: Any, text: Optional[str] = None) -> None:
        """Shared rating/text rules; raises ValidationException."""
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise ValidationException(
                "Rating must be a whole number",
                code="INVALID_RATING",
                details={"channel": self.name, "rating": rating},
            )
        if not self.config.is_valid_rating(rating):
            raise ValidationException(
                f"Rating must be between {self.config.min_rating} and {self.config.max_rating}",
                code="INVALID_RATING",
                details={"channel": self.name, "rating": rating},
            )
        if text is not None and len(text) > self.max_text_length:
            raise ValidationException(
                f"Feedback text must be at most {self.max_text_length} characters",
                code="TEXT_TOO_LONG",
                details={"channel": self.name, "length": len(text)},
            )

    def aggregate(self, entries: Iterable[Any]) -> Optional[dict[str, float | int]]:
        """Published aggregate for one subject's entries, or None when the channel has none."""
        if self.policy is AggregationPolicy.NONE:
            return None
        return compute_latest_per_rater_rating(
            entries,
            rater_attr=self.rater_attr,
            config=self.config,
        )


COACH_REVIEWS = FeedbackChannel(
    name="coach_reviews",
    subject_attr="coach_profile_id",
    rater_attr="reviewer_id",
    policy=AggregationPolicy.LATEST_PER_RATER,
)

ENSEMBLE_FEEDBACK = FeedbackChannel(
    name="ensemble_feedback",
    subject_attr="ensemble_profile_id",
    rater_attr="coach_profile_id",
    policy=AggregationPolicy.NONE,
)
