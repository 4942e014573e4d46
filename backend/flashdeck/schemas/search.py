"""Search scopes understood by the search engine."""

from __future__ import annotations

from enum import Enum


class SearchScope(str, Enum):
    MY_DECKS = "MY_DECKS"
    PUBLIC_DECKS = "PUBLIC_DECKS"
    SAVED_DECKS = "SAVED_DECKS"
    DELETED_DECKS = "DELETED_DECKS"


__all__ = ["SearchScope"]
