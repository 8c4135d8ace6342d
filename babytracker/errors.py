# errors.py
"""Typed service errors and the handlers that turn them into JSON responses.

Services raise these instead of ``HTTPException`` so the same rules can be
exercised without a request. Every error body carries an ``error`` message;
some errors attach extra keys (e.g. the existing membership when a join code
is redeemed twice).
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from babytracker.config import is_production, settings


logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, payload: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.payload = payload or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, **self.payload}


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class TooManyRequestsError(AppError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests"


class DuplicateRoleError(BadRequestError):
    """A (user, profile) pair already has a role row."""

    default_message = "You already have access to this baby profile"


def _first_validation_message(exc: RequestValidationError) -> str:
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        msg = err.get("msg") or "Invalid value"
        if loc:
            return f"{'.'.join(loc)}: {msg}"
        return msg
    return "Invalid request"


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _first_validation_message(exc), "errors": errors},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled error method=%s path=%s", request.method, request.url.path)
    content: dict[str, Any] = {"error": "Internal server error"}
    if not is_production(settings):
        content["detail"] = f"{type(exc).__name__}: {exc}"
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
