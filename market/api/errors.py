# market/api/errors.py
"""Renders every failure as {error, message, details, code, timestamp}."""
import traceback
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from market.domain.errors import AppError
from market.utils.settings import ENVIRONMENT
from market.utils.logging import get_logger

logger = get_logger(__name__)


def error_body(
    error: str,
    message: str | None = None,
    details: Any = None,
    code: str | None = None,
) -> dict:
    return {
        "error": error,
        "message": message,
        "details": details,
        "code": code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def _respond(status_code: int, body: dict) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
        return _respond(exc.status_code, error_body("Internal server error", exc.message, exc.details, exc.code))

    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return _respond(exc.status_code, error_body(exc.message, None, exc.details, exc.code))


async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info(f"{request.method} {request.url.path} -> 400 validation failed")
    return _respond(
        400,
        error_body("Validation failed", "The request data is invalid", exc.errors(), "VALIDATION_ERROR"),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _respond(404, error_body("Not Found", str(exc.detail), None, "NOT_FOUND"))
    return _respond(exc.status_code, error_body("HTTP Error", str(exc.detail), None, "HTTP_ERROR"))


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"{request.method} {request.url.path} -> 409 integrity error: {exc.orig}")
    return _respond(
        409,
        error_body("Duplicate entry", "The resource already exists or is still referenced", None, "DUPLICATE_ENTRY"),
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    details = traceback.format_exc() if ENVIRONMENT == "development" else None
    return _respond(
        500,
        error_body("Internal server error", "An unexpected error occurred", details, "INTERNAL_ERROR"),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
