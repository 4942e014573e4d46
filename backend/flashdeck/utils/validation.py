"""Input validation helpers that raise domain validation errors."""

from __future__ import annotations

import uuid

from flashdeck.core.errors import ErrorCode, ValidationError
from flashdeck.schemas.common import OrderBy

MIN_PAGE_SIZE = 2
MAX_PAGE_SIZE = 50


def parse_uuid(value: object, *, code: ErrorCode, label: str) -> uuid.UUID:
    """Return ``value`` as a UUID or raise a validation error with ``code``."""
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(code, f"{label} must be a non-empty string.")
    try:
        return uuid.UUID(value.strip())
    except ValueError as exc:
        raise ValidationError(code, f"{label} '{value}' is not a valid identifier.") from exc


def parse_deck_id(value: object) -> uuid.UUID:
    return parse_uuid(value, code=ErrorCode.INVALID_DECK_ID, label="Deck ID")


def parse_flashcard_id(value: object) -> uuid.UUID:
    return parse_uuid(value, code=ErrorCode.INVALID_FLASHCARD_ID, label="Flashcard ID")


def require_user_id(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(ErrorCode.INVALID_USER_ID, "User ID must be a non-empty string.")
    return value.strip()


def validate_limit(limit: object) -> int:
    """Accept page sizes between 2 and 50 inclusive."""
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValidationError(ErrorCode.INVALID_LIMIT_VALUE, "Limit must be an integer.")
    if not MIN_PAGE_SIZE <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(
            ErrorCode.INVALID_LIMIT_VALUE,
            f"Limit must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}.",
            details={"limit": limit},
        )
    return limit


def validate_order_by(order_by: object) -> OrderBy:
    try:
        return OrderBy(order_by)
    except ValueError as exc:
        raise ValidationError(
            ErrorCode.INVALID_ORDERBY_VALUE,
            "orderBy must be either 'title' or 'created_at'.",
            details={"order_by": str(order_by)},
        ) from exc


__all__ = [
    "MAX_PAGE_SIZE",
    "MIN_PAGE_SIZE",
    "parse_deck_id",
    "parse_flashcard_id",
    "parse_uuid",
    "require_user_id",
    "validate_limit",
    "validate_order_by",
]
