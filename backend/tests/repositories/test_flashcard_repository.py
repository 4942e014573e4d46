from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.models.flashcard import Flashcard
from flashdeck.repositories.flashcard import FlashcardRepository
from tests.helpers import add_deck, add_flashcard, count_rows


@pytest.mark.asyncio
async def test_list_page_orders_by_creation_and_skips_deleted(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Spanish")
    await add_flashcard(db_session, deck, term="tres", offset_minutes=3)
    await add_flashcard(db_session, deck, term="uno", offset_minutes=1)
    await add_flashcard(db_session, deck, term="dos", offset_minutes=2)
    await add_flashcard(db_session, deck, term="borrado", offset_minutes=0, is_deleted=True)
    repo = FlashcardRepository(db_session)

    first, token = await repo.list_page(deck.id, limit=2)
    assert [card.term for card in first] == ["uno", "dos"]
    assert token == str(first[-1].id)

    second, token = await repo.list_page(deck.id, limit=2, cursor=token)
    assert [card.term for card in second] == ["tres"]
    assert token is None


@pytest.mark.asyncio
async def test_list_active_skips_deleted_and_other_decks(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="French")
    other = await add_deck(db_session, owner_id="u1", title="German")
    await add_flashcard(db_session, deck, term="un")
    await add_flashcard(db_session, deck, term="deux", is_deleted=True)
    await add_flashcard(db_session, other, term="eins")
    repo = FlashcardRepository(db_session)

    assert [card.term for card in await repo.list_active(deck.id)] == ["un"]


@pytest.mark.asyncio
async def test_list_existing_is_scoped_to_deck(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="French")
    other = await add_deck(db_session, owner_id="u1", title="German")
    mine = await add_flashcard(db_session, deck, term="un")
    foreign = await add_flashcard(db_session, other, term="eins")
    repo = FlashcardRepository(db_session)

    found = await repo.list_existing(deck.id, [mine.id, foreign.id, uuid.uuid4()])

    assert [card.id for card in found] == [mine.id]
    assert await repo.list_existing(deck.id, []) == []


@pytest.mark.asyncio
async def test_delete_for_deck_removes_every_flashcard(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="French")
    other = await add_deck(db_session, owner_id="u1", title="German")
    await add_flashcard(db_session, deck, term="un")
    await add_flashcard(db_session, deck, term="deux", is_deleted=True)
    await add_flashcard(db_session, other, term="eins")
    repo = FlashcardRepository(db_session)

    await repo.delete_for_deck(deck.id)

    assert await count_rows(db_session, Flashcard, Flashcard.deck_id == deck.id) == 0
    assert await count_rows(db_session, Flashcard, Flashcard.deck_id == other.id) == 1
