"""Application-wide constants for CoachConnect."""

from __future__ import annotations

BRAND_NAME = "CoachConnect"

# Rating bounds shared by both feedback flows
MIN_RATING = 1
MAX_RATING = 5

# Text constraints
MAX_REVIEW_TEXT_LENGTH = 2000
MAX_GOALS_LENGTH = 2000
MAX_ENSEMBLE_NAME_LENGTH = 200

# Session metadata bounds
MIN_SESSION_YEAR = 2000
MAX_SESSION_YEAR = 2100

# Invite tokens are url-safe and unguessable (token_urlsafe byte count)
INVITE_TOKEN_BYTES = 32

# Health check
API_VERSION = "v1"

# API metadata
API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Booking and review backend for the CoachConnect coaching marketplace"
