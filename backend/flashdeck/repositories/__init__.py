"""Repository layer for database interactions."""

from flashdeck.repositories.activity import (
    DeckActivityRepository,
    QuizAttemptRepository,
    SearchLogRepository,
)
from flashdeck.repositories.base import BaseRepository
from flashdeck.repositories.deck import DeckRepository, SavedDeckRepository
from flashdeck.repositories.flashcard import FlashcardRepository
from flashdeck.repositories.publish_request import PublishRequestRepository
from flashdeck.repositories.quiz import QuizRepository
from flashdeck.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "DeckActivityRepository",
    "DeckRepository",
    "FlashcardRepository",
    "PublishRequestRepository",
    "QuizAttemptRepository",
    "QuizRepository",
    "SavedDeckRepository",
    "SearchLogRepository",
    "UserRepository",
]
