"""Database models shared across the deck core."""

from flashdeck.models.activity import (
    DeckActivityLog,
    DeckActivityType,
    QuizAttempt,
    QuizType,
    SearchLog,
)
from flashdeck.models.deck import Deck, DeckPublishRequest, PublishRequestStatus, SavedDeck
from flashdeck.models.flashcard import Flashcard
from flashdeck.models.quiz import QuestionAndAnswer, Quiz
from flashdeck.models.user import User

__all__ = [
    "Deck",
    "DeckActivityLog",
    "DeckActivityType",
    "DeckPublishRequest",
    "Flashcard",
    "PublishRequestStatus",
    "QuestionAndAnswer",
    "Quiz",
    "QuizAttempt",
    "QuizType",
    "SavedDeck",
    "SearchLog",
    "User",
]
