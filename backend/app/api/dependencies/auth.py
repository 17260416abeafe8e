# backend/app/api/dependencies/auth.py
"""
Authentication dependencies.

The bearer token identifies the account; profile ownership is looked up
per request so a freshly created coach or ensemble profile is visible
immediately.
"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
import jwt
from sqlalchemy.orm import Session

from ...auth import decode_access_token, oauth2_scheme
from ...principal import CallerContext
from ...repositories.profile_repository import CoachProfileRepository, EnsembleProfileRepository
from .database import get_db

logger = logging.getLogger(__name__)

_CREDENTIALS_ERROR = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail={"message": "Authentication required", "code": "UNAUTHENTICATED", "details": {}},
    headers={"WWW-Authenticate": "Bearer"},
)


def build_caller_context(db: Session, user_id: str, email: str) -> CallerContext:
    """Resolve the profiles an account owns."""
    coach = CoachProfileRepository(db).get_by_user_id(user_id)
    ensembles = EnsembleProfileRepository(db).list_by_user_id(user_id)
    return CallerContext(
        user_id=user_id,
        email=email,
        coach_profile_id=coach.id if coach else None,
        ensemble_profile_ids=tuple(e.id for e in ensembles),
    )


def get_current_caller(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> CallerContext:
    """
    Verify the bearer token and build the caller context.

    Raises:
        HTTPException: 401 when the token is missing, invalid or lacks claims
    """
    if not token:
        raise _CREDENTIALS_ERROR
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as e:
        logger.info(f"Rejected access token: {type(e).__name__}")
        raise _CREDENTIALS_ERROR

    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        raise _CREDENTIALS_ERROR
    return build_caller_context(db, str(user_id), str(email))
