# backend/course_eval/api/responses.py
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.config import settings
from ..core.errors import ErrorKind, Result

logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, message: str | None = None) -> JSONResponse:
    body = {"error": error}
    if message:
        body["message"] = message
    return JSONResponse(status_code=status_code, content=body)


def respond(result: Result, status_code: int = 200) -> Response:
    """Map a service Result onto an HTTP response."""
    if result.ok:
        if status_code == 204:
            return Response(status_code=204)
        if result.value is None:
            return Response(status_code=status_code)
        return JSONResponse(status_code=status_code, content=jsonable_encoder(result.value))

    err = result.error
    detail = err.detail if (err.kind is ErrorKind.INTERNAL and settings.DEBUG) else None
    return error_response(err.status_code, err.message, detail)


def _describe(errors) -> str:
    parts = []
    for e in errors:
        loc = ".".join(str(p) for p in e.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {e.get('msg')}" if loc else str(e.get("msg")))
    return "; ".join(parts)


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def _validation(request: Request, exc: RequestValidationError):
        logger.info("[validation] %s %s: %s", request.method, request.url.path, _describe(exc.errors()))
        return error_response(400, "Validation failed", _describe(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def _http(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)
