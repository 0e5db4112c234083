# backend/course_eval/api/endpoints/users.py
from typing import Any, Dict, Optional

from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import JSONResponse, Response

from ...core.config import settings
from ...core.guard import require_user
from ...core.store import get_store
from ...models.user import ChangePasswordRequest, ForgotPasswordRequest, LoginRequest, RegisterRequest
from ...services import accounts
from ..responses import respond

router = APIRouter()


def _session_response(session: accounts.Session, body: Dict[str, Any]) -> Response:
    resp = JSONResponse(status_code=200, content=body)
    resp.set_cookie(
        settings.REFRESH_COOKIE_NAME,
        session.refresh_token,
        path="/",
        secure=True,
        samesite="strict",
        httponly=True,
        max_age=settings.REFRESH_TOKEN_DAYS * 24 * 3600,
    )
    return resp


@router.post("/register", status_code=201)
def register(body: RegisterRequest, store=Depends(get_store)):
    return respond(accounts.register(store, body), status_code=201)


@router.post("/sessions")
def create_session(body: LoginRequest, store=Depends(get_store)):
    result = accounts.authenticate(store, body)
    if not result.ok:
        return respond(result)
    return _session_response(result.value, {"token": result.value.token})


@router.patch("/token/refresh")
def refresh_token(refresh: Optional[str] = Cookie(default=None, alias=settings.REFRESH_COOKIE_NAME)):
    result = accounts.refresh(refresh)
    if not result.ok:
        return respond(result)
    return _session_response(result.value, {"token": result.value.token, "role": result.value.role})


@router.get("/me")
def me(claims: Dict[str, Any] = Depends(require_user), store=Depends(get_store)):
    return respond(accounts.profile(store, claims["sub"]))


@router.post("/password/forgot")
def forgot_password(body: ForgotPasswordRequest, store=Depends(get_store)):
    return respond(accounts.forgot_password(store, body))


@router.post("/password/reset")
def reset_password(body: ChangePasswordRequest, store=Depends(get_store)):
    return respond(accounts.change_password(store, body))
