# backend/app/models/base_enum.py
"""
Safe enum helpers for SQLAlchemy.

Status columns persist enum VALUES ('pending'), never member NAMES
('PENDING'), so raw SQL, conditional UPDATEs and the ORM agree on what is
stored.

Usage:
    from app.models.base_enum import create_safe_enum

    class MyModel(Base):
        status = Column(
            create_safe_enum(MyStatus, "my_status"),
            nullable=False,
            default=MyStatus.ACTIVE,
        )

All enums stored this way inherit from (str, Enum) with explicit lowercase
values.
"""

from enum import Enum
from typing import Sequence, Type

from sqlalchemy import Enum as SAEnum


def create_safe_enum(
    enum_class: Type[Enum],
    name: str,
    *,
    native_enum: bool = False,
    validate_strings: bool = True,
) -> SAEnum:
    """
    Create a SQLAlchemy Enum that stores enum values (not names).

    Defaults to a VARCHAR + CHECK representation (native_enum=False) so the
    same schema works on PostgreSQL and SQLite.
    """
    return SAEnum(
        enum_class,
        name=name,
        native_enum=native_enum,
        validate_strings=validate_strings,
        values_callable=_get_enum_values,
        length=max(len(v) for v in _get_enum_values(enum_class)),
    )


def _get_enum_values(enum_class: Type[Enum]) -> Sequence[str]:
    """Extract values from an enum class for SAEnum storage."""
    return [member.value for member in enum_class]


def verify_enum_consistency(enum_class: Type[Enum]) -> None:
    """
    Verify that an enum is safe for database storage.

    Raises:
        AssertionError: If the enum does not inherit from str or has non-string values
    """
    if not issubclass(enum_class, str):
        raise AssertionError(
            f"{enum_class.__name__} must inherit from (str, Enum) for safe database storage"
        )
    for member in enum_class:
        if not isinstance(member.value, str):
            raise AssertionError(
                f"{enum_class.__name__}.{member.name} value must be a string, "
                f"got {type(member.value).__name__}"
            )
