"""Public exports for Pydantic schemas."""

from __future__ import annotations

from .activity import (
    DeckActivityRecord,
    LatestDeckActivity,
    LatestQuizAttempt,
    QuizAttemptRecord,
    SearchLogRecord,
)
from .common import OrderBy
from .deck import (
    DeckCreate,
    DeckPage,
    DeckRecord,
    DeckUpdate,
    DeckUpdateResult,
    DeckUpdateStatus,
)
from .flashcard import FlashcardCreate, FlashcardPage, FlashcardRecord, FlashcardUpdate
from .search import SearchScope

__all__ = [
    "DeckActivityRecord",
    "DeckCreate",
    "DeckPage",
    "DeckRecord",
    "DeckUpdate",
    "DeckUpdateResult",
    "DeckUpdateStatus",
    "FlashcardCreate",
    "FlashcardPage",
    "FlashcardRecord",
    "FlashcardUpdate",
    "LatestDeckActivity",
    "LatestQuizAttempt",
    "OrderBy",
    "QuizAttemptRecord",
    "SearchLogRecord",
    "SearchScope",
]
