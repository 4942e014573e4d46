"""Shared helpers for tests."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.core.errors import ErrorCode, ExternalServiceError
from flashdeck.dependencies import DeckCore, build_deck_core
from flashdeck.models.deck import Deck
from flashdeck.models.flashcard import Flashcard
from flashdeck.models.user import User
from flashdeck.services.moderation import ModerationClient

BASE_TIME = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class StubEmbeddingService:
    """Deterministic stand-in for the OpenAI embedding adapter."""

    def __init__(
        self,
        vectors: dict[str, Sequence[float]] | None = None,
        *,
        default: Sequence[float] = (1.0, 0.0, 0.0),
        fail: bool = False,
    ) -> None:
        self.vectors = {key: list(value) for key, value in (vectors or {}).items()}
        self.default = list(default)
        self.fail = fail
        self.documents: list[str] = []
        self.queries: list[str] = []

    async def embed_document(self, text: str) -> list[float]:
        self.documents.append(text)
        return self._lookup(text)

    async def embed_query(self, text: str) -> list[float]:
        self.queries.append(text)
        return self._lookup(text)

    def _lookup(self, text: str) -> list[float]:
        if self.fail:
            raise ExternalServiceError(
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                message="Failed to generate text embedding.",
            )
        return list(self.vectors.get(text, self.default))


def build_core(
    session: AsyncSession,
    *,
    embedding: StubEmbeddingService | None = None,
    moderation: ModerationClient | None = None,
) -> DeckCore:
    return build_deck_core(
        session,
        embedding_service=embedding or StubEmbeddingService(),  # type: ignore[arg-type]
        moderation=moderation or ModerationClient(webhook_url=None),
    )


async def add_user(session: AsyncSession, user_id: str, name: str | None = None) -> User:
    user = User(id=user_id, name=name or f"Name of {user_id}", created_at=BASE_TIME)
    session.add(user)
    await session.flush()
    return user


async def add_deck(
    session: AsyncSession,
    *,
    owner_id: str,
    title: str,
    is_private: bool = False,
    is_deleted: bool = False,
    created_at: datetime | None = None,
    embedding: Sequence[float] | None = None,
    flashcard_count: int = 0,
) -> Deck:
    deck = Deck(
        id=uuid.uuid4(),
        owner_id=owner_id,
        title=title,
        description="",
        is_private=is_private,
        is_deleted=is_deleted,
        cover_photo="https://example.com/cover.png",
        flashcard_count=flashcard_count,
        embedding_field=list(embedding) if embedding is not None else None,
        created_at=created_at or BASE_TIME,
    )
    session.add(deck)
    await session.flush()
    return deck


async def add_flashcard(
    session: AsyncSession,
    deck: Deck,
    *,
    term: str,
    offset_minutes: int = 0,
    is_deleted: bool = False,
) -> Flashcard:
    flashcard = Flashcard(
        id=uuid.uuid4(),
        deck_id=deck.id,
        term=term,
        definition=f"{term} definition",
        is_deleted=is_deleted,
        created_at=BASE_TIME + timedelta(minutes=offset_minutes),
    )
    session.add(flashcard)
    await session.flush()
    return flashcard


async def flashcard_count(session: AsyncSession, deck_id: uuid.UUID) -> int:
    result = await session.execute(select(Deck.flashcard_count).where(Deck.id == deck_id))
    return int(result.scalar_one())


async def count_rows(session: AsyncSession, model: type, *criteria: object) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)  # type: ignore[arg-type]
    result = await session.execute(stmt)
    return int(result.scalar_one())
