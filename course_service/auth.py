# course_service/auth.py
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Cookie

from course_service import config
from course_service.errors import AuthError, InvalidTokenError

logger = logging.getLogger("course_service.auth")

TOKEN_COOKIE = "token"


def create_access_token(user_id: str, expires_minutes: Optional[int] = None, **claims) -> str:
    """Create a JWT carrying ``userId``, as issued by the user service."""
    minutes = config.ACCESS_TOKEN_EXPIRE_MINUTES if expires_minutes is None else expires_minutes
    to_encode = {"userId": user_id, **claims}
    to_encode["exp"] = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode(to_encode, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> str:
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.warning("Rejected expired token")
        raise InvalidTokenError()
    except jwt.InvalidTokenError:
        logger.warning("Rejected invalid token")
        raise InvalidTokenError()

    user_id = payload.get("userId")
    if not user_id:
        raise InvalidTokenError()
    return str(user_id)


def verify_token(token: Optional[str] = Cookie(None, alias=TOKEN_COOKIE)) -> str:
    """Verify the ``token`` cookie; use this as a dependency on protected routes."""
    if not token:
        raise AuthError()
    return decode_token(token)
