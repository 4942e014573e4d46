"""Shared error primitives and FastAPI exception handlers."""

from __future__ import annotations

import logging
from enum import StrEnum
from http import HTTPStatus
from typing import Awaitable, Callable, Mapping, Sequence, cast

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

ExceptionHandlerCallable = Callable[[Request, Exception], Awaitable[Response]]

logger = logging.getLogger("flashdeck.errors")


class ErrorCode(StrEnum):
    """Canonical error codes surfaced by the deck core."""

    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_DECK_ID = "INVALID_DECK_ID"
    INVALID_DECK_IDS = "INVALID_DECK_IDS"
    INVALID_DECK_DATA = "INVALID_DECK_DATA"
    INVALID_FLASHCARD_ID = "INVALID_FLASHCARD_ID"
    INVALID_FLASHCARD_IDS = "INVALID_FLASHCARD_IDS"
    INVALID_FLASHCARD_DATA = "INVALID_FLASHCARD_DATA"
    INVALID_USER_ID = "INVALID_USER_ID"
    INVALID_LIMIT_VALUE = "INVALID_LIMIT_VALUE"
    INVALID_ORDERBY_VALUE = "INVALID_ORDERBY_VALUE"
    INVALID_SEARCH_QUERY = "INVALID_SEARCH_QUERY"
    INVALID_SEARCH_FILTER = "INVALID_SEARCH_FILTER"
    INVALID_UPDATE_DATA = "INVALID_UPDATE_DATA"
    INVALID_ACTIVITY_VALUE = "INVALID_ACTIVITY_VALUE"
    INVALID_QUIZ_ATTEMPT = "INVALID_QUIZ_ATTEMPT"
    NOT_ENOUGH_FLASHCARDS = "NOT_ENOUGH_FLASHCARDS"
    EXCEEDS_AVAILABLE_CARDS = "EXCEEDS_AVAILABLE_CARDS"

    # Resources
    NOT_FOUND = "NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    DECK_NOT_FOUND = "DECK_NOT_FOUND"
    FLASHCARD_NOT_FOUND = "FLASHCARD_NOT_FOUND"
    DECK_NOT_SAVED = "DECK_NOT_SAVED"
    ACTIVITY_NOT_FOUND = "ACTIVITY_NOT_FOUND"
    QUIZ_ATTEMPT_NOT_FOUND = "QUIZ_ATTEMPT_NOT_FOUND"
    PUBLISH_REQUEST_NOT_FOUND = "PUBLISH_REQUEST_NOT_FOUND"

    # Authorization
    UNAUTHORIZED_USER = "UNAUTHORIZED_USER"

    # Business logic
    CONFLICT = "CONFLICT"
    DECK_DELETED = "DECK_DELETED"
    DECK_IS_PRIVATE = "DECK_IS_PRIVATE"
    DECK_ALREADY_SAVED = "DECK_ALREADY_SAVED"
    CANNOT_SAVE_OWN_DECK = "CANNOT_SAVE_OWN_DECK"
    PUBLISH_REQUEST_ALREADY_PENDING = "PUBLISH_REQUEST_ALREADY_PENDING"

    # External services
    EMBEDDING_SERVICE_ERROR = "EMBEDDING_SERVICE_ERROR"
    MODERATION_SERVICE_ERROR = "MODERATION_SERVICE_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Internal
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"

    # Transport/common
    FORBIDDEN = "FORBIDDEN"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"


class ApplicationError(Exception):
    """Domain/business error that should be rendered in the public API."""

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        *,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: object | None = None,
    ) -> None:
        super().__init__(message)
        self.code = str(code)
        self.message = message
        self.status_code = status_code
        self.details = details


class ValidationError(ApplicationError):
    """400 error raised before any store access for malformed input."""

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        *,
        details: object | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class NotFoundError(ApplicationError):
    """404 error with a domain specific code."""

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        *,
        details: object | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
        )


class UnauthorizedError(ApplicationError):
    """403 error when the acting user does not own the resource."""

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | str = ErrorCode.UNAUTHORIZED_USER,
        details: object | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
        )


class ConflictError(ApplicationError):
    """409 error for duplicate/conflict scenarios."""

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        *,
        details: object | None = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
        )


class ExternalServiceError(ApplicationError):
    """502/503 error when dependencies fail."""

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        *,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        details: object | None = None,
    ) -> None:
        if status_code not in (status.HTTP_502_BAD_GATEWAY, status.HTTP_503_SERVICE_UNAVAILABLE):
            raise ValueError("External service errors must map to 502 or 503.")
        super().__init__(
            code=code,
            message=message,
            status_code=status_code,
            details=details,
        )


class StorageError(ApplicationError):
    """500 error wrapping an unclassified store failure with its context."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        entity_id: object | None = None,
    ) -> None:
        details: dict[str, object] = {"operation": operation}
        if entity_id is not None:
            details["entity_id"] = str(entity_id)
        super().__init__(
            code=ErrorCode.DATABASE_ERROR,
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )
        self.operation = operation
        self.entity_id = entity_id


def register_exception_handlers(app: FastAPI) -> None:
    """Attach global exception handlers to the FastAPI app."""

    app.add_exception_handler(
        ApplicationError,
        cast(ExceptionHandlerCallable, application_error_handler),
    )
    app.add_exception_handler(
        RequestValidationError,
        cast(ExceptionHandlerCallable, request_validation_exception_handler),
    )
    app.add_exception_handler(
        StarletteHTTPException,
        cast(ExceptionHandlerCallable, http_exception_handler),
    )
    app.add_exception_handler(
        Exception,
        cast(ExceptionHandlerCallable, unexpected_exception_handler),
    )


async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(
            "Application error",
            extra={"code": exc.code, "details": exc.details, "path": request.url.path},
        )
    return error_response(
        status_code=exc.status_code,
        code=exc.code,
        message=exc.message,
        details=exc.details,
    )


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    details = _format_validation_errors(exc)
    return error_response(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code=ErrorCode.VALIDATION_ERROR,
        message="Request validation failed.",
        details=details or None,
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    detail = exc.detail

    if isinstance(detail, Mapping):
        code = _coerce_code(detail.get("code"))
        message = str(detail.get("message") or HTTPStatus(exc.status_code).phrase)
        details = detail.get("details")
    else:
        code = _default_code_for_status(exc.status_code)
        message = str(detail or HTTPStatus(exc.status_code).phrase)
        details = None

    return error_response(
        status_code=exc.status_code,
        code=code,
        message=message,
        details=details,
    )


async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled exception during request",
        exc_info=(exc.__class__, exc, exc.__traceback__),
    )
    return error_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=ErrorCode.INTERNAL_ERROR,
        message="An unexpected error occurred. Please try again later.",
    )


def error_response(
    *,
    status_code: int,
    code: ErrorCode | str,
    message: str,
    details: object | None = None,
) -> JSONResponse:
    """Return JSONResponse adhering to the public error contract."""
    body = build_error_payload(code=code, message=message, details=details)
    return JSONResponse(content=jsonable_encoder(body), status_code=status_code)


def build_error_payload(
    *,
    code: ErrorCode | str,
    message: str,
    details: object | None = None,
) -> dict[str, dict[str, object]]:
    error_section: dict[str, object] = {
        "code": _coerce_code(code),
        "message": message,
    }
    if details is not None:
        error_section["details"] = details
    return {"error": error_section}


def _format_validation_errors(exc: RequestValidationError) -> dict[str, str]:
    formatted: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = _format_error_location(loc)
        message = error.get("msg", "Invalid value")
        if field in formatted:
            formatted[field] = f"{formatted[field]}; {message}"
        else:
            formatted[field] = message
    return formatted


def _format_error_location(location: Sequence[object]) -> str:
    filtered = [str(part) for part in location if part not in {"body", "query", "path"}]
    if not filtered:
        filtered = [str(part) for part in location]
    return ".".join(filtered) if filtered else "_schema"


def _default_code_for_status(status_code: int) -> str:
    mapping: dict[int, ErrorCode] = {
        status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_ERROR,
        status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
        status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
        status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.METHOD_NOT_ALLOWED,
        status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
        status.HTTP_500_INTERNAL_SERVER_ERROR: ErrorCode.INTERNAL_ERROR,
        status.HTTP_502_BAD_GATEWAY: ErrorCode.SERVICE_UNAVAILABLE,
        status.HTTP_503_SERVICE_UNAVAILABLE: ErrorCode.SERVICE_UNAVAILABLE,
    }
    return mapping.get(status_code, ErrorCode.INTERNAL_ERROR)


def _coerce_code(code: ErrorCode | str | None) -> str:
    if code is None:
        return ErrorCode.INTERNAL_ERROR
    return str(code)


__all__ = [
    "ApplicationError",
    "ConflictError",
    "ErrorCode",
    "ExternalServiceError",
    "NotFoundError",
    "StorageError",
    "UnauthorizedError",
    "ValidationError",
    "application_error_handler",
    "build_error_payload",
    "error_response",
    "http_exception_handler",
    "register_exception_handlers",
    "request_validation_exception_handler",
    "unexpected_exception_handler",
]
