"""Cleanup helpers for generated quizzes and their question rows."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import delete, select

from flashdeck.models.quiz import QuestionAndAnswer, Quiz
from flashdeck.repositories.base import BaseRepository


class QuizRepository(BaseRepository[Quiz]):
    async def delete_for_deck(self, deck_id: uuid.UUID) -> None:
        """Remove every quiz built from the deck together with its questions."""
        quiz_ids = select(Quiz.id).where(Quiz.associated_deck_id == deck_id)
        with self.storage_errors("delete_deck_quizzes", deck_id):
            await self.session.execute(
                delete(QuestionAndAnswer)
                .where(QuestionAndAnswer.quiz_id.in_(quiz_ids))
                .execution_options(synchronize_session=False)
            )
            await self.session.execute(
                delete(Quiz)
                .where(Quiz.associated_deck_id == deck_id)
                .execution_options(synchronize_session=False)
            )

    async def delete_questions_for_flashcards(self, flashcard_ids: Sequence[uuid.UUID]) -> None:
        if not flashcard_ids:
            return
        with self.storage_errors("delete_flashcard_questions"):
            await self.session.execute(
                delete(QuestionAndAnswer)
                .where(QuestionAndAnswer.related_flashcard_id.in_(list(flashcard_ids)))
                .execution_options(synchronize_session=False)
            )


__all__ = ["QuizRepository"]
