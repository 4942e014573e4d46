"""Generated quizzes and their question rows, removed alongside their sources."""

from __future__ import annotations

import uuid

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column

from flashdeck.models.base import GUID, Base, CreatedAtMixin


class Quiz(CreatedAtMixin, Base):
    __tablename__ = "quiz"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    associated_deck_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)

    __table_args__ = (Index("ix_quiz_associated_deck_id", "associated_deck_id"),)


class QuestionAndAnswer(Base):
    __tablename__ = "question_and_answers"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    quiz_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("quiz.id", ondelete="CASCADE"),
        nullable=False,
    )
    related_flashcard_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("ix_question_and_answers_quiz_id", "quiz_id"),
        Index("ix_question_and_answers_flashcard", "related_flashcard_id"),
    )


__all__ = ["QuestionAndAnswer", "Quiz"]
