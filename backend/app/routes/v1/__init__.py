# backend/app/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1, plus the unversioned operational
endpoints (health, metrics) mounted at the root.
"""

from . import bookings, health, prometheus, review_invites, reviews, session_reviews

__all__ = [
    "bookings",
    "health",
    "prometheus",
    "review_invites",
    "reviews",
    "session_reviews",
]
