"""Service outcomes with an explicit error kind.

Services never raise into the endpoint layer: they return a ``Result`` that
holds either a value or a ``ServiceError``. Endpoints turn the error kind
into an HTTP status (see ``api/responses.py``).
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from .store import ConflictError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    INTERNAL = "internal"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    message: str
    detail: Optional[str] = None

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[ServiceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, detail: Optional[str] = None) -> "Result":
        return cls(error=ServiceError(kind=kind, message=message, detail=detail))


def validation(message: str) -> Result:
    return Result.failure(ErrorKind.VALIDATION, message)


def not_found(message: str) -> Result:
    return Result.failure(ErrorKind.NOT_FOUND, message)


def conflict(message: str) -> Result:
    return Result.failure(ErrorKind.CONFLICT, message)


def unauthorized(message: str) -> Result:
    return Result.failure(ErrorKind.UNAUTHORIZED, message)


def captured(action: str) -> Callable[[Callable[..., Result]], Callable[..., Result]]:
    """
    Wrap a service operation so that any exception coming out of the store or
    the computation becomes a Result instead of escaping to the caller.
    Unique-constraint violations map to CONFLICT, everything else to INTERNAL.
    """

    def decorator(fn: Callable[..., Result]) -> Callable[..., Result]:
        @functools.wraps(fn)
        def wrapper(*args, **kwargs) -> Result:
            try:
                return fn(*args, **kwargs)
            except ConflictError as e:
                logger.warning("[%s] conflict: %s", action, e)
                return conflict(str(e) or "Resource already exists")
            except Exception as e:
                logger.exception("[%s] failed", action)
                return Result.failure(ErrorKind.INTERNAL, "Internal server error", detail=repr(e))

        return wrapper

    return decorator
