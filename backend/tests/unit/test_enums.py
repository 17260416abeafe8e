from enum import Enum

import pytest

from app.core.ulid_helper import generate_ulid
from app.models import BookingStatus, EnsembleReviewStatus, ReviewInviteStatus, SessionFormat, SessionType
from app.models.base_enum import verify_enum_consistency


@pytest.mark.parametrize(
    "enum_class",
    [BookingStatus, ReviewInviteStatus, EnsembleReviewStatus, SessionFormat, SessionType],
)
def test_stored_enums_are_string_enums(enum_class):
    verify_enum_consistency(enum_class)


def test_int_enum_is_rejected():
    class Priority(int, Enum):
        LOW = 1

    with pytest.raises(AssertionError, match="must inherit from"):
        verify_enum_consistency(Priority)


def test_generated_ids_are_unique_ulid_strings():
    first, second = generate_ulid(), generate_ulid()
    assert len(first) == 26
    assert first != second
