# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for CoachConnect

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: generic CRUD plus conditional status updates
- BookingRepository: bookings and their status transitions
- ReviewRepository / ReviewInviteRepository: coach reviews and invites
- EnsembleReviewRepository: coach -> ensemble session feedback
- CoachProfileRepository / EnsembleProfileRepository: profile lookups and
  derived counters

Usage:
    from app.repositories import BookingRepository

    repo = BookingRepository(db)
    changed = repo.update_if_status(booking_id, BookingStatus.PENDING, status=BookingStatus.ACCEPTED)
"""

from .base_repository import BaseRepository
from .booking_repository import BookingRepository
from .ensemble_review_repository import EnsembleReviewRepository
from .profile_repository import CoachProfileRepository, EnsembleProfileRepository
from .review_invite_repository import ReviewInviteRepository
from .review_repository import ReviewRepository

__all__ = [
    "BaseRepository",
    "BookingRepository",
    "CoachProfileRepository",
    "EnsembleProfileRepository",
    "EnsembleReviewRepository",
    "ReviewInviteRepository",
    "ReviewRepository",
]
