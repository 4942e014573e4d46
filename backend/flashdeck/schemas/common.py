"""Schemas and validators shared by deck and flashcard records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from flashdeck.core.clock import ensure_aware


class OrderBy(str, Enum):
    """Supported orderings for owner deck listings."""

    TITLE = "title"
    CREATED_AT = "created_at"


def aware_or_none(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return ensure_aware(value)


__all__ = ["OrderBy", "aware_or_none"]
