"""Repository helpers for flashcards nested under decks."""

from __future__ import annotations

import uuid
from collections.abc import Sequence

from sqlalchemy import and_, delete, or_, select

from flashdeck.models.flashcard import Flashcard
from flashdeck.repositories.base import BaseRepository
from flashdeck.repositories.deck import parse_cursor


class FlashcardRepository(BaseRepository[Flashcard]):
    """Query helpers for Flashcard entities."""

    async def get(self, deck_id: uuid.UUID, flashcard_id: uuid.UUID) -> Flashcard | None:
        stmt = select(Flashcard).where(Flashcard.deck_id == deck_id, Flashcard.id == flashcard_id)
        with self.storage_errors("get_flashcard", flashcard_id):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def list_page(
        self,
        deck_id: uuid.UUID,
        *,
        limit: int,
        cursor: str | None = None,
    ) -> tuple[list[Flashcard], str | None]:
        """Return non-deleted flashcards in creation order, one page at a time."""
        stmt = (
            select(Flashcard)
            .where(Flashcard.deck_id == deck_id, Flashcard.is_deleted.is_(False))
            .order_by(Flashcard.created_at.asc(), Flashcard.id.asc())
        )

        cursor_id = parse_cursor(cursor)
        anchor = await self.get(deck_id, cursor_id) if cursor_id is not None else None
        if anchor is not None:
            stmt = stmt.where(
                or_(
                    Flashcard.created_at > anchor.created_at,
                    and_(Flashcard.created_at == anchor.created_at, Flashcard.id > anchor.id),
                )
            )

        with self.storage_errors("list_flashcards", deck_id):
            result = await self.session.execute(stmt.limit(limit + 1))
            flashcards = list(result.scalars())

        if len(flashcards) > limit:
            flashcards = flashcards[:limit]
            return flashcards, str(flashcards[-1].id)
        return flashcards, None

    async def list_active(self, deck_id: uuid.UUID) -> list[Flashcard]:
        stmt = (
            select(Flashcard)
            .where(Flashcard.deck_id == deck_id, Flashcard.is_deleted.is_(False))
            .order_by(Flashcard.created_at.asc(), Flashcard.id.asc())
        )
        with self.storage_errors("list_all_flashcards", deck_id):
            result = await self.session.execute(stmt)
            return list(result.scalars())

    async def list_existing(
        self,
        deck_id: uuid.UUID,
        flashcard_ids: Sequence[uuid.UUID],
    ) -> list[Flashcard]:
        if not flashcard_ids:
            return []
        stmt = select(Flashcard).where(
            Flashcard.deck_id == deck_id,
            Flashcard.id.in_(flashcard_ids),
        )
        with self.storage_errors("list_flashcards_by_ids", deck_id):
            result = await self.session.execute(stmt)
            return list(result.scalars())

    async def delete_many(self, flashcards: Sequence[Flashcard]) -> None:
        ids = [flashcard.id for flashcard in flashcards]
        if not ids:
            return
        with self.storage_errors("delete_flashcards"):
            await self.session.execute(
                delete(Flashcard)
                .where(Flashcard.id.in_(ids))
                .execution_options(synchronize_session="fetch")
            )

    async def delete_for_deck(self, deck_id: uuid.UUID) -> None:
        with self.storage_errors("delete_deck_flashcards", deck_id):
            await self.session.execute(
                delete(Flashcard)
                .where(Flashcard.deck_id == deck_id)
                .execution_options(synchronize_session="fetch")
            )


__all__ = ["FlashcardRepository"]
