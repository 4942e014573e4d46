from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.repositories.activity import SearchLogRepository
from tests.helpers import BASE_TIME


@pytest.mark.asyncio
async def test_record_stores_trimmed_query_and_vector(db_session: AsyncSession) -> None:
    repo = SearchLogRepository(db_session)

    entry = await repo.record("u1", "  cell biology ", (0.5, 0.5, 0.0))

    assert entry.id is not None
    assert entry.search_query == "cell biology"
    assert entry.embedding == [0.5, 0.5, 0.0]
    (latest,) = await repo.latest_for_user("u1", limit=5)
    assert latest.id == entry.id


@pytest.mark.asyncio
async def test_latest_for_user_is_newest_first_and_scoped(db_session: AsyncSession) -> None:
    repo = SearchLogRepository(db_session)
    older = await repo.record("u1", "older", [1.0, 0.0, 0.0])
    newer = await repo.record("u1", "newer", [0.0, 1.0, 0.0])
    await repo.record("u2", "elsewhere", [0.0, 0.0, 1.0])
    older.searched_at = BASE_TIME
    newer.searched_at = BASE_TIME + timedelta(minutes=1)
    await db_session.flush()

    entries = await repo.latest_for_user("u1", limit=5)

    assert [entry.search_query for entry in entries] == ["newer", "older"]
    assert [entry.search_query for entry in await repo.latest_for_user("u1", limit=1)] == [
        "newer"
    ]
