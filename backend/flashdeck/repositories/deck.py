"""Repository helpers for decks and saved-deck bookmarks."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

import numpy as np
from sqlalchemy import ColumnElement, Select, and_, case, delete, or_, select, update

from flashdeck.models.deck import Deck, SavedDeck
from flashdeck.repositories.base import BaseRepository
from flashdeck.schemas.common import OrderBy
from flashdeck.schemas.search import SearchScope

logger = logging.getLogger("flashdeck.repositories.deck")


def parse_cursor(cursor: str | None) -> uuid.UUID | None:
    """Decode an opaque page token. Unreadable tokens behave like no token."""
    if not cursor:
        return None
    try:
        return uuid.UUID(str(cursor))
    except ValueError:
        logger.warning("Ignoring malformed page token", extra={"cursor": cursor})
        return None


def cosine_distances(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Return the cosine distance of every row in ``matrix`` to ``query``.

    Zero-length vectors are treated as maximally dissimilar (distance 1.0).
    """
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    dots = matrix @ query
    similarities = np.divide(dots, norms, out=np.zeros_like(dots), where=norms > 0)
    return 1.0 - similarities


class DeckRepository(BaseRepository[Deck]):
    """Persistence primitives for Deck objects."""

    async def get(self, deck_id: uuid.UUID) -> Deck | None:
        with self.storage_errors("get_deck", deck_id):
            result = await self.session.execute(select(Deck).where(Deck.id == deck_id))
            return result.scalar_one_or_none()

    #
    # Paginated listings
    #
    async def list_for_owner(
        self,
        owner_id: str,
        *,
        deleted: bool,
        limit: int,
        cursor: str | None = None,
        order_by: OrderBy = OrderBy.TITLE,
    ) -> tuple[list[Deck], str | None]:
        stmt = select(Deck).where(Deck.owner_id == owner_id, Deck.is_deleted.is_(deleted))
        return await self._paginate(stmt, limit=limit, cursor=cursor, order_by=order_by)

    async def list_public(
        self,
        *,
        limit: int,
        cursor: str | None = None,
    ) -> tuple[list[Deck], str | None]:
        stmt = select(Deck).where(Deck.is_private.is_(False), Deck.is_deleted.is_(False))
        return await self._paginate(stmt, limit=limit, cursor=cursor, order_by=OrderBy.TITLE)

    async def _paginate(
        self,
        stmt: Select[tuple[Deck]],
        *,
        limit: int,
        cursor: str | None,
        order_by: OrderBy,
    ) -> tuple[list[Deck], str | None]:
        anchor = await self._resolve_anchor(cursor)

        if order_by is OrderBy.TITLE:
            stmt = stmt.order_by(Deck.title.asc(), Deck.id.asc())
            if anchor is not None:
                stmt = stmt.where(
                    or_(
                        Deck.title > anchor.title,
                        and_(Deck.title == anchor.title, Deck.id > anchor.id),
                    )
                )
        else:
            stmt = stmt.order_by(Deck.created_at.desc(), Deck.id.desc())
            if anchor is not None:
                stmt = stmt.where(
                    or_(
                        Deck.created_at < anchor.created_at,
                        and_(Deck.created_at == anchor.created_at, Deck.id < anchor.id),
                    )
                )

        # One extra row tells whether another page exists.
        with self.storage_errors("list_decks"):
            result = await self.session.execute(stmt.limit(limit + 1))
            decks = list(result.scalars())

        if len(decks) > limit:
            decks = decks[:limit]
            return decks, str(decks[-1].id)
        return decks, None

    async def _resolve_anchor(self, cursor: str | None) -> Deck | None:
        cursor_id = parse_cursor(cursor)
        if cursor_id is None:
            return None
        anchor = await self.get(cursor_id)
        if anchor is None:
            logger.info("Page token refers to a missing deck, restarting", extra={"cursor": cursor})
        return anchor

    #
    # Search primitives
    #
    @staticmethod
    def scope_criteria(
        scope: SearchScope,
        *,
        user_id: str,
        saved_deck_ids: Sequence[uuid.UUID] | None = None,
    ) -> list[ColumnElement[bool]]:
        """Translate a search scope into WHERE clauses over decks."""
        if scope is SearchScope.MY_DECKS:
            return [Deck.owner_id == user_id, Deck.is_deleted.is_(False)]
        if scope is SearchScope.DELETED_DECKS:
            return [Deck.owner_id == user_id, Deck.is_deleted.is_(True)]
        if scope is SearchScope.SAVED_DECKS:
            return [Deck.id.in_(list(saved_deck_ids or [])), Deck.is_deleted.is_(False)]
        return [Deck.is_private.is_(False), Deck.is_deleted.is_(False)]

    async def find_by_title(
        self,
        title: str,
        criteria: Sequence[ColumnElement[bool]],
        *,
        limit: int,
    ) -> list[Deck]:
        stmt = (
            select(Deck)
            .where(*criteria, Deck.title == title)
            .order_by(Deck.created_at.desc(), Deck.id.desc())
            .limit(limit)
        )
        with self.storage_errors("find_decks_by_title"):
            result = await self.session.execute(stmt)
            return list(result.scalars())

    async def find_nearest(
        self,
        query_vector: Sequence[float],
        criteria: Sequence[ColumnElement[bool]],
        *,
        limit: int,
        distance_threshold: float,
    ) -> list[Deck]:
        """Return up to ``limit`` decks ranked by cosine distance to ``query_vector``.

        Candidates farther than ``distance_threshold`` are excluded. Ranking runs in
        process over every deck in scope; large catalogues need a store-side vector
        index instead.
        """
        stmt = select(Deck).where(*criteria, Deck.embedding_field.is_not(None))
        with self.storage_errors("find_nearest_decks"):
            result = await self.session.execute(stmt)
            candidates = [
                deck
                for deck in result.scalars()
                if deck.embedding_field and len(deck.embedding_field) == len(query_vector)
            ]

        if not candidates:
            return []

        matrix = np.asarray([deck.embedding_field for deck in candidates], dtype=np.float64)
        distances = cosine_distances(matrix, np.asarray(query_vector, dtype=np.float64))
        ranked = sorted(
            (
                (float(distance), index)
                for index, distance in enumerate(distances)
                if distance <= distance_threshold
            ),
        )
        return [candidates[index] for _, index in ranked[:limit]]

    #
    # Mutations
    #
    async def adjust_flashcard_count(self, deck_id: uuid.UUID, delta: int) -> None:
        """Atomically shift the denormalized counter, never going below zero."""
        if delta == 0:
            return
        shifted = Deck.flashcard_count + delta
        value = shifted if delta > 0 else case((shifted < 0, 0), else_=shifted)
        stmt = (
            update(Deck)
            .where(Deck.id == deck_id)
            .values(flashcard_count=value)
            .execution_options(synchronize_session="fetch")
        )
        with self.storage_errors("adjust_flashcard_count", deck_id):
            await self.session.execute(stmt)

    async def refresh(self, deck: Deck) -> Deck:
        with self.storage_errors("refresh_deck", deck.id):
            await self.session.refresh(deck)
        return deck

    async def delete(self, deck_id: uuid.UUID) -> None:
        with self.storage_errors("delete_deck", deck_id):
            await self.session.execute(
                delete(Deck)
                .where(Deck.id == deck_id)
                .execution_options(synchronize_session="fetch")
            )


class SavedDeckRepository(BaseRepository[SavedDeck]):
    """Bookmarks of public decks kept per user."""

    async def get(self, user_id: str, deck_id: uuid.UUID) -> SavedDeck | None:
        stmt = select(SavedDeck).where(SavedDeck.user_id == user_id, SavedDeck.deck_id == deck_id)
        with self.storage_errors("get_saved_deck", deck_id):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def list_deck_ids(self, user_id: str) -> list[uuid.UUID]:
        stmt = select(SavedDeck.deck_id).where(SavedDeck.user_id == user_id)
        with self.storage_errors("list_saved_deck_ids"):
            result = await self.session.execute(stmt)
            return [row[0] for row in result.all()]

    async def list_for_user(
        self,
        user_id: str,
        *,
        limit: int,
        cursor: str | None = None,
    ) -> tuple[list[Deck], str | None]:
        """Return saved decks, most recently saved first.

        The inner join drops entries whose deck no longer exists. The page
        token is the deck ID of the last returned entry.
        """
        stmt = (
            select(SavedDeck, Deck)
            .join(Deck, Deck.id == SavedDeck.deck_id)
            .where(SavedDeck.user_id == user_id)
            .order_by(SavedDeck.saved_at.desc(), SavedDeck.id.desc())
        )

        cursor_id = parse_cursor(cursor)
        anchor = await self.get(user_id, cursor_id) if cursor_id is not None else None
        if anchor is not None:
            stmt = stmt.where(
                or_(
                    SavedDeck.saved_at < anchor.saved_at,
                    and_(SavedDeck.saved_at == anchor.saved_at, SavedDeck.id < anchor.id),
                )
            )

        with self.storage_errors("list_saved_decks"):
            result = await self.session.execute(stmt.limit(limit + 1))
            rows = list(result.all())

        decks = [deck for _, deck in rows]
        if len(decks) > limit:
            decks = decks[:limit]
            return decks, str(decks[-1].id)
        return decks, None

    async def remove(self, saved: SavedDeck) -> None:
        with self.storage_errors("unsave_deck", saved.deck_id):
            await self.session.delete(saved)
            await self.session.flush()


__all__ = ["DeckRepository", "SavedDeckRepository", "cosine_distances", "parse_cursor"]
