"""Tests for base repository."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from flashdeck.core.errors import ErrorCode, StorageError
from flashdeck.repositories.base import BaseRepository


@pytest.mark.asyncio
async def test_base_repository_add() -> None:
    """Test BaseRepository add method."""
    mock_session = AsyncMock()
    mock_session.add = AsyncMock()
    mock_session.flush = AsyncMock()

    repo = BaseRepository(mock_session)

    instance = object()
    result = await repo.add(instance)

    assert result is instance
    mock_session.add.assert_called_once_with(instance)
    mock_session.flush.assert_awaited_once()


@pytest.mark.asyncio
async def test_base_repository_wraps_driver_failures() -> None:
    """Driver errors surface as StorageError carrying the operation."""
    mock_session = MagicMock()
    mock_session.add = MagicMock(return_value=None)
    mock_session.flush = AsyncMock(
        side_effect=OperationalError("INSERT INTO decks", {}, Exception("disk full"))
    )
    repo = BaseRepository(mock_session)

    with pytest.raises(StorageError) as exc:
        await repo.add(MagicMock(id="deck-1"), operation="create_deck")

    assert exc.value.code == ErrorCode.DATABASE_ERROR
    assert exc.value.status_code == 500
    assert exc.value.details == {"operation": "create_deck", "entity_id": "deck-1"}


def test_storage_errors_leaves_other_exceptions_alone() -> None:
    repo = BaseRepository(MagicMock())

    with pytest.raises(KeyError):
        with repo.storage_errors("lookup"):
            raise KeyError("missing")
