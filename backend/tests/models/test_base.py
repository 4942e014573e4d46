from __future__ import annotations

import uuid

import numpy as np
import pytest
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.models.base import GUID, EmbeddingVector
from flashdeck.models.deck import Deck
from tests.helpers import add_deck


def test_guid_binds_string_on_sqlite() -> None:
    value = uuid.uuid4()
    guid = GUID()

    assert guid.process_bind_param(value, sqlite.dialect()) == str(value)
    assert guid.process_bind_param(value, postgresql.dialect()) is value
    assert guid.process_result_value(str(value), sqlite.dialect()) == value


def test_embedding_vector_coerces_components_to_float() -> None:
    vector = EmbeddingVector()

    bound = vector.process_bind_param([1, np.float32(0.5), 2.25], sqlite.dialect())

    assert bound == [1.0, 0.5, 2.25]
    assert all(type(component) is float for component in bound)
    assert vector.process_bind_param(None, sqlite.dialect()) is None


@pytest.mark.asyncio
async def test_embedding_round_trips_through_store(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Vectors", embedding=[1, 0, 2])
    await db_session.commit()

    result = await db_session.execute(select(Deck.embedding_field).where(Deck.id == deck.id))

    assert result.scalar_one() == [1.0, 0.0, 2.0]
