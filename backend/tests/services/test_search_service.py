from __future__ import annotations

import uuid
from datetime import timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.core.errors import ErrorCode, ExternalServiceError, ValidationError
from flashdeck.models.activity import SearchLog
from flashdeck.models.deck import Deck, SavedDeck
from flashdeck.schemas.search import SearchScope
from flashdeck.services.search import average_vectors, merge_search_results
from tests.helpers import BASE_TIME, StubEmbeddingService, add_deck, build_core, count_rows

BIOLOGY = [1.0, 0.0, 0.0]
CELLS = [0.95, 0.05, 0.0]
HISTORY = [0.0, 1.0, 0.0]


async def _seed_library(session: AsyncSession) -> dict[str, Deck]:
    return {
        "biology": await add_deck(session, owner_id="u1", title="Biology", embedding=BIOLOGY),
        "cells": await add_deck(session, owner_id="u1", title="Cell Biology", embedding=CELLS),
        "history": await add_deck(session, owner_id="u1", title="History", embedding=HISTORY),
        "private": await add_deck(
            session,
            owner_id="u2",
            title="Biology",
            is_private=True,
            embedding=BIOLOGY,
        ),
    }


def _embedding() -> StubEmbeddingService:
    return StubEmbeddingService({"biology": BIOLOGY, "wars": HISTORY})


@pytest.mark.asyncio
async def test_search_puts_exact_title_matches_first(db_session: AsyncSession) -> None:
    decks = await _seed_library(db_session)
    embedding = _embedding()
    search = build_core(db_session, embedding=embedding).search

    results = await search.search_decks("reader", "  biology ")

    assert [record.id for record in results] == [decks["biology"].id, decks["cells"].id]
    assert embedding.queries == ["biology"]
    assert await count_rows(db_session, SearchLog, SearchLog.user_id == "reader") == 1


@pytest.mark.asyncio
async def test_search_my_decks_includes_private(db_session: AsyncSession) -> None:
    decks = await _seed_library(db_session)
    search = build_core(db_session, embedding=_embedding()).search

    results = await search.search_decks("u2", "biology", scope="MY_DECKS")

    assert [record.id for record in results] == [decks["private"].id]


@pytest.mark.asyncio
async def test_search_saved_decks(db_session: AsyncSession) -> None:
    decks = await _seed_library(db_session)
    db_session.add(SavedDeck(deck_id=decks["cells"].id, user_id="reader"))
    await db_session.flush()
    search = build_core(db_session, embedding=_embedding()).search

    results = await search.search_decks("reader", "biology", scope=SearchScope.SAVED_DECKS)

    assert [record.id for record in results] == [decks["cells"].id]


@pytest.mark.asyncio
async def test_search_saved_scope_without_saves_is_empty(db_session: AsyncSession) -> None:
    await _seed_library(db_session)
    embedding = _embedding()
    search = build_core(db_session, embedding=embedding).search

    results = await search.search_decks("reader", "biology", scope="SAVED_DECKS")

    assert results == []
    assert embedding.queries == []


@pytest.mark.asyncio
async def test_search_rejects_invalid_query_and_scope(db_session: AsyncSession) -> None:
    embedding = _embedding()
    search = build_core(db_session, embedding=embedding).search

    with pytest.raises(ValidationError) as query:
        await search.search_decks("reader", "bio-logy!")
    with pytest.raises(ValidationError) as scope:
        await search.search_decks("reader", "biology", scope="EVERYTHING")

    assert query.value.code == ErrorCode.INVALID_SEARCH_QUERY
    assert scope.value.code == ErrorCode.INVALID_SEARCH_FILTER
    assert embedding.queries == []
    assert await count_rows(db_session, SearchLog) == 0


@pytest.mark.asyncio
async def test_search_embedding_failure_propagates(db_session: AsyncSession) -> None:
    await _seed_library(db_session)
    search = build_core(db_session, embedding=StubEmbeddingService(fail=True)).search

    with pytest.raises(ExternalServiceError) as exc:
        await search.search_decks("reader", "biology")

    assert exc.value.code == ErrorCode.EMBEDDING_SERVICE_ERROR
    assert await count_rows(db_session, SearchLog) == 0


@pytest.mark.asyncio
async def test_recommendations_without_history_are_empty(db_session: AsyncSession) -> None:
    await _seed_library(db_session)
    search = build_core(db_session).search

    assert await search.recommend_decks("reader") == []


@pytest.mark.asyncio
async def test_recommendations_follow_recent_searches(db_session: AsyncSession) -> None:
    decks = await _seed_library(db_session)
    for index, vector in enumerate([[1.0, 0.0, 0.0], [0.9, 0.1, 0.0]]):
        db_session.add(
            SearchLog(
                user_id="reader",
                search_query=f"query {index}",
                embedding=vector,
                searched_at=BASE_TIME + timedelta(minutes=index),
            )
        )
    await db_session.flush()
    search = build_core(db_session).search

    results = await search.recommend_decks("reader")

    assert [record.id for record in results] == [decks["cells"].id, decks["biology"].id]


@pytest.mark.asyncio
async def test_recommendations_use_latest_history_only(db_session: AsyncSession) -> None:
    decks = await _seed_library(db_session)
    db_session.add(
        SearchLog(
            user_id="reader",
            search_query="old",
            embedding=BIOLOGY,
            searched_at=BASE_TIME,
        )
    )
    for index in range(5):
        db_session.add(
            SearchLog(
                user_id="reader",
                search_query=f"recent {index}",
                embedding=HISTORY,
                searched_at=BASE_TIME + timedelta(days=1, minutes=index),
            )
        )
    await db_session.flush()
    search = build_core(db_session).search

    results = await search.recommend_decks("reader")

    assert [record.id for record in results] == [decks["history"].id]


def test_merge_search_results_dedupes_and_caps() -> None:
    first, second, third = (SimpleNamespace(id=uuid.uuid4()) for _ in range(3))

    merged = merge_search_results([first], [first, second, third], limit=2)

    assert merged == [first, second]


def test_average_vectors() -> None:
    assert average_vectors([[1.0, 0.0], [0.0, 1.0]]) == pytest.approx([0.5, 0.5])
