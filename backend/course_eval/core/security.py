# backend/course_eval/core/security.py
"""Token issuing/verification and password hashing."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from .config import settings

logger = logging.getLogger(__name__)


class Role(str, Enum):
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return check_password_hash(hashed, password)


ACCESS = "access"
REFRESH = "refresh"


def _encode(sub: str, role: str, expires: timedelta, token_type: str = ACCESS) -> str:
    now = datetime.now(timezone.utc)
    payload = {"sub": sub, "role": role, "type": token_type, "iat": now, "exp": now + expires}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_access_token(sub: str, role: str) -> str:
    return _encode(sub, role, timedelta(minutes=settings.ACCESS_TOKEN_MINUTES), ACCESS)


def create_refresh_token(sub: str, role: str) -> str:
    return _encode(sub, role, timedelta(days=settings.REFRESH_TOKEN_DAYS), REFRESH)


def decode_token(token: Optional[str], token_type: str = ACCESS) -> Optional[Dict[str, Any]]:
    """
    Decoded claims, or None when the token is absent, expired, forged or of
    another type (a refresh token is never a bearer credential and vice versa).
    """
    if not token:
        return None
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.info("[security] rejected token: %s", e)
        return None
    if claims.get("type") != token_type:
        logger.info("[security] rejected %r token where %r was expected", claims.get("type"), token_type)
        return None
    return claims
