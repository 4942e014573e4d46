from __future__ import annotations

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.core.config import settings
from flashdeck.dependencies import build_deck_core, build_embedding_service
from flashdeck.services.moderation import ModerationClient
from tests.helpers import StubEmbeddingService


def test_build_embedding_service_uses_settings() -> None:
    service = build_embedding_service()

    assert service.model == settings.embedding_model
    assert service.dimensions == settings.embedding_dimensions


@pytest.mark.asyncio
async def test_deck_core_services_share_one_session(db_session: AsyncSession) -> None:
    core = build_deck_core(
        db_session,
        embedding_service=StubEmbeddingService(),  # type: ignore[arg-type]
        moderation=ModerationClient(webhook_url=None),
    )

    assert core.decks.deck_repo.session is db_session
    assert core.flashcards.flashcard_repo.session is db_session
    assert core.search.search_log_repo.session is db_session
    assert core.publishing.deck_service is core.decks
    assert core.decks.flashcard_service is core.flashcards
    assert core.search.distance_threshold == settings.search_distance_threshold
