"""
Bearer-token authentication.

Tokens are HS256 JWTs whose ``sub`` claim is the acting user's id. Issuing
tokens belongs to the identity service; ``create_access_token`` exists for
tests and local tooling.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from fintrack.config import settings
from fintrack.errors import AuthenticationError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, expires_minutes: Optional[int] = None) -> str:
    expires = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    return jwt.encode(
        {"sub": user_id, "exp": expires},
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )


def decode_user_id(token: str) -> str:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError as e:
        logger.warning("Rejected bearer token: %s", e)
        raise AuthenticationError("Not authorized, token failed") from e
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Not authorized, token failed")
    return str(user_id)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """FastAPI dependency resolving the acting user's id."""
    if credentials is None:
        raise AuthenticationError("Not authorized, no token")
    return decode_user_id(credentials.credentials)
