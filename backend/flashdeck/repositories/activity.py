"""Repositories for append-only search, activity and quiz attempt logs."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select

from flashdeck.models.activity import DeckActivityLog, QuizAttempt, SearchLog
from flashdeck.repositories.base import BaseRepository


class SearchLogRepository(BaseRepository[SearchLog]):
    async def record(self, user_id: str, query_text: str, embedding: Sequence[float]) -> SearchLog:
        entry = SearchLog(
            user_id=user_id,
            search_query=query_text.strip(),
            embedding=list(embedding),
        )
        return await self.add(entry, operation="log_search")

    async def latest_for_user(self, user_id: str, *, limit: int) -> list[SearchLog]:
        stmt = (
            select(SearchLog)
            .where(SearchLog.user_id == user_id)
            .order_by(SearchLog.searched_at.desc(), SearchLog.id.desc())
            .limit(limit)
        )
        with self.storage_errors("list_search_logs", user_id):
            result = await self.session.execute(stmt)
            return list(result.scalars())


class DeckActivityRepository(BaseRepository[DeckActivityLog]):
    async def latest_for_user(self, user_id: str) -> DeckActivityLog | None:
        stmt = (
            select(DeckActivityLog)
            .where(DeckActivityLog.user_id == user_id)
            .order_by(DeckActivityLog.occurred_at.desc(), DeckActivityLog.id.desc())
            .limit(1)
        )
        with self.storage_errors("get_latest_deck_activity", user_id):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()


class QuizAttemptRepository(BaseRepository[QuizAttempt]):
    async def latest_for_user(self, user_id: str) -> QuizAttempt | None:
        stmt = (
            select(QuizAttempt)
            .where(QuizAttempt.user_id == user_id)
            .order_by(QuizAttempt.attempted_at.desc(), QuizAttempt.id.desc())
            .limit(1)
        )
        with self.storage_errors("get_latest_quiz_attempt", user_id):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()


__all__ = ["DeckActivityRepository", "QuizAttemptRepository", "SearchLogRepository"]
