from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True)
class RatingsConfig:
    # Valid star range shared by coach reviews and session feedback
    min_rating: int = 1
    max_rating: int = 5

    # Published aggregate: decimals kept after half-up rounding
    decimals: int = 1
    # Value published for a subject nobody has rated yet
    empty_rating: float = 0.0

    def is_valid_rating(self, value: int) -> bool:
        return self.min_rating <= value <= self.max_rating


DEFAULT_RATINGS_CONFIG: Final = RatingsConfig()
