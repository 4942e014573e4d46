"""Append-only study logs: searches, deck activity and quiz attempts."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from flashdeck.core.clock import current_timestamp
from flashdeck.models.base import GUID, Base, EmbeddingVector


class DeckActivityType(str, enum.Enum):
    """Kinds of study events recorded against a deck."""

    IDENTIFICATION_QUIZ = "IDENTIFICATION_QUIZ"
    MULTIPLE_CHOICE_QUIZ = "MULTIPLE_CHOICE_QUIZ"
    STUDY = "STUDY"


class QuizType(str, enum.Enum):
    """Quiz flavours that produce scored attempts."""

    IDENTIFICATION_QUIZ = "IDENTIFICATION_QUIZ"
    MULTIPLE_CHOICE_QUIZ = "MULTIPLE_CHOICE_QUIZ"


class SearchLog(Base):
    __tablename__ = "search_deck_logs"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    search_query: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float]] = mapped_column(EmbeddingVector(), nullable=False)
    searched_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=current_timestamp,
    )

    __table_args__ = (Index("ix_search_deck_logs_user_searched", "user_id", "searched_at"),)


class DeckActivityLog(Base):
    __tablename__ = "deck_logs"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    # Logs survive deck deletion; readers treat a vanished deck as missing.
    deck_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    event_type: Mapped[DeckActivityType] = mapped_column(
        Enum(
            DeckActivityType,
            name="deck_activity_type_enum",
            native_enum=False,
            validate_strings=True,
        ),
        nullable=False,
    )
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=current_timestamp,
    )

    __table_args__ = (Index("ix_deck_logs_user_occurred", "user_id", "occurred_at"),)


class QuizAttempt(Base):
    __tablename__ = "quiz_attempts"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    deck_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    quiz_type: Mapped[QuizType] = mapped_column(
        Enum(QuizType, name="quiz_type_enum", native_enum=False, validate_strings=True),
        nullable=False,
    )
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False)
    correct_question_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    incorrect_question_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    attempted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("ix_quiz_attempts_user_attempted", "user_id", "attempted_at"),)


__all__ = ["DeckActivityLog", "DeckActivityType", "QuizAttempt", "QuizType", "SearchLog"]
