# backend/course_eval/services/accounts.py
"""Registration, sessions, profile and password reset."""
from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from ..core import mailer
from ..core.config import settings
from ..core.errors import ErrorKind, Result, captured, conflict, not_found, unauthorized, validation
from ..core.security import (
    REFRESH,
    Role,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from ..core.store import PASSWORD_RESETS, SCHOOLS, USERS
from ..models.user import ChangePasswordRequest, ForgotPasswordRequest, LoginRequest, RegisterRequest
from .aggregator import parse_timestamp

logger = logging.getLogger(__name__)

PUBLIC_USER_FIELDS = ("id", "name", "email", "role")


@dataclass(frozen=True)
class Session:
    token: str
    refresh_token: str
    role: str


def _issue(user_id: str, role: str) -> Session:
    return Session(
        token=create_access_token(user_id, role),
        refresh_token=create_refresh_token(user_id, role),
        role=role,
    )


@captured("register")
def register(store, body: RegisterRequest) -> Result:
    email = body.email.lower()
    if store.find_one(USERS, email=email):
        return conflict("User already exists")

    school = store.find_one(SCHOOLS, name=body.school)
    if not school:
        return validation("School not found")

    user = store.insert(
        USERS,
        {
            "email": email,
            "password": hash_password(body.password),
            "name": body.name,
            "surname": body.surname,
            "student_register": body.student_register,
            "role": Role.STUDENT.value,
            "school_id": school["id"],
            "session_id": str(uuid.uuid4()),
        },
    )
    logger.info("[accounts] registered user %s at school %s", user.get("id"), school["id"])
    return Result.success()


@captured("authenticate")
def authenticate(store, body: LoginRequest) -> Result:
    user = store.find_one(USERS, email=body.email.lower())
    if not user or not verify_password(body.password, user.get("password") or ""):
        return validation("Invalid credentials")
    return Result.success(_issue(user["id"], user.get("role") or Role.STUDENT.value))


def refresh(refresh_token: Optional[str]) -> Result:
    claims = decode_token(refresh_token, token_type=REFRESH)
    if not claims or not claims.get("sub") or not claims.get("role"):
        return unauthorized("Invalid refresh token")
    return Result.success(_issue(claims["sub"], claims["role"]))


@captured("profile")
def profile(store, user_id: str) -> Result:
    user = store.get(USERS, user_id)
    if not user:
        return not_found("User not found")
    return Result.success({"user": {k: user.get(k) for k in PUBLIC_USER_FIELDS}})


@captured("forgot_password")
def forgot_password(store, body: ForgotPasswordRequest) -> Result:
    email = body.email.lower()
    if not store.find_one(USERS, email=email):
        return not_found("Usuário não encontrado")

    token = secrets.token_urlsafe(24)
    reset = store.insert(PASSWORD_RESETS, {"email": email, "token_password": token})

    link = f"{settings.RESET_PASSWORD_URL}/{token}"
    sent, info = mailer.send_email(
        email,
        "Redefinir senha - Sistema de Avaliação",
        f'<b>Para redefinir sua senha,</b> <a href="{link}">clique aqui</a>.',
    )
    if not sent:
        # an unsent token must not stay redeemable
        store.delete(PASSWORD_RESETS, reset["id"])
        return Result.failure(ErrorKind.INTERNAL, "Não foi possível enviar o e-mail", detail=info)
    return Result.success({"message": "Email enviado com sucesso"})


def _reset_expired(reset: Dict[str, Any], now: datetime) -> bool:
    created = parse_timestamp(reset.get("created_at"))
    if created is None:
        return True
    return now - created > timedelta(minutes=settings.RESET_TOKEN_MINUTES)


@captured("change_password")
def change_password(store, body: ChangePasswordRequest, now: Optional[datetime] = None) -> Result:
    reset = store.find_one(PASSWORD_RESETS, token_password=body.token_password)
    if not reset:
        return not_found("Token inválido")

    if _reset_expired(reset, now or datetime.now(timezone.utc)):
        store.delete(PASSWORD_RESETS, reset["id"])
        logger.info("[accounts] expired reset token for %s discarded", reset.get("email"))
        return validation("Token expirado")

    user = store.find_one(USERS, email=reset["email"])
    if not user:
        return not_found("User not found")

    store.update(USERS, user["id"], {"password": hash_password(body.new_password)})
    store.delete(PASSWORD_RESETS, reset["id"])
    logger.info("[accounts] password changed for user %s", user["id"])
    return Result.success({"message": "Senha alterada com sucesso"})


def public_user(row: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in row.items() if k not in ("password", "session_id")}
