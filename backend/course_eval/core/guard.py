# backend/course_eval/core/guard.py
"""
Access guard for protected routes.

The guard is evaluated fresh on every request: the bearer token is decoded
into a claim, and the claim's role is compared with the role the route needs.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .security import ACCESS, decode_token

_bearer = HTTPBearer(auto_error=False)


class GuardState(str, Enum):
    AUTHORIZED = "authorized"
    REJECTED = "rejected"


def evaluate(claims: Optional[Mapping[str, Any]], required_role: str) -> GuardState:
    if not isinstance(claims, Mapping):
        return GuardState.REJECTED
    role = claims.get("role")
    if not isinstance(role, str) or role != required_role:
        return GuardState.REJECTED
    return GuardState.AUTHORIZED


def current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[Dict[str, Any]]:
    if credentials is None:
        return None
    return decode_token(credentials.credentials, token_type=ACCESS)


def require_user(claims: Optional[Dict[str, Any]] = Depends(current_claims)) -> Dict[str, Any]:
    """Any authenticated caller."""
    if not claims or not claims.get("sub"):
        raise HTTPException(status_code=401, detail="Unauthorized")
    return claims


def require_role(role: str) -> Callable[..., Dict[str, Any]]:
    def dependency(claims: Optional[Dict[str, Any]] = Depends(current_claims)) -> Dict[str, Any]:
        if evaluate(claims, role) is GuardState.REJECTED:
            raise HTTPException(status_code=401, detail="Unauthorized")
        return claims

    return dependency
