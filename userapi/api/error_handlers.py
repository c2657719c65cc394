"""Global exception handlers — every failure leaves as an error envelope.

- ApiError → its own status and per-field messages
- RequestValidationError → 422, messages keyed by the offending field
- Starlette HTTPException → envelope with the framework's status
- Exception (catch-all) → 500, never leaks internal details
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from userapi.core.errors import ApiError
from userapi.core.responses import build_error, build_not_found, envelope_response
from userapi.schemas.common import ErrorSet

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_api_error_handler(app)
    _register_validation_error_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_api_error_handler(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        logger.info(
            "%s on %s %s: %s",
            type(exc).__name__, request.method, request.url.path, exc,
        )
        headers = None
        if exc.http_status == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return envelope_response(exc.to_envelope(), exc.http_status, headers)


def _register_validation_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Malformed request on %s: %s", request.url.path, exc.errors())
        return envelope_response(build_error(_validation_error_set(exc)), 422)


def _register_http_error_handler(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            envelope = build_not_found()
        else:
            envelope = build_error({"request": [str(exc.detail)]})
        return envelope_response(envelope, exc.status_code, getattr(exc, "headers", None))


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s: %s",
            request.method, request.url.path, exc,
            exc_info=True,
        )
        return envelope_response(
            build_error({"server": ["Server error"]}),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def _validation_error_set(exc: RequestValidationError) -> ErrorSet:
    """Key pydantic errors by field name; whole-body problems go under ``body``."""
    errors: ErrorSet = {}
    for error in exc.errors():
        # loc looks like ("body", "email") or ("query", "page"); unparseable
        # JSON reports ("body", <char offset>) instead
        loc = tuple(error.get("loc", ()))
        if error.get("type") == "json_invalid" or len(loc) < 2 or not isinstance(loc[1], str):
            field = "body"
        else:
            field = ".".join(str(part) for part in loc[1:])
        messages = errors.setdefault(field, [])
        if error["msg"] not in messages:
            messages.append(error["msg"])
    return errors
