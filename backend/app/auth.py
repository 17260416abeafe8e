"""
Access-token verification.

Tokens are issued by the identity service; this backend only verifies them
and reads the account id (``sub``) and ``email`` claims.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi.security import OAuth2PasswordBearer
import jwt

from .core.config import settings

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

DEFAULT_TOKEN_LIFETIME = timedelta(hours=12)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a JWT access token.

    Raises:
        jwt.PyJWTError: If the signature, expiry or format is invalid
    """
    payload_raw = jwt.decode(
        token,
        _secret_value(settings.secret_key),
        algorithms=[settings.algorithm],
        options={"verify_aud": False},
    )
    return cast(Dict[str, Any], payload_raw)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token signed with the shared secret.

    Used by local tooling and tests; production tokens come from the identity service.
    """
    to_encode = data.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_LIFETIME)
    return jwt.encode(to_encode, _secret_value(settings.secret_key), algorithm=settings.algorithm)
