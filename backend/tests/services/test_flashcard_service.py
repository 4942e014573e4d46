from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.core.errors import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from flashdeck.models.quiz import QuestionAndAnswer, Quiz
from flashdeck.schemas.flashcard import FlashcardCreate, FlashcardUpdate
from flashdeck.services.flashcard import FlashcardService
from tests.helpers import add_deck, add_flashcard, build_core, count_rows, flashcard_count


def _service(session: AsyncSession) -> FlashcardService:
    return build_core(session).flashcards


def _cards(*terms: str) -> list[FlashcardCreate]:
    return [FlashcardCreate(term=term, definition=f"{term} means something") for term in terms]


@pytest.mark.asyncio
async def test_create_flashcards_raises_deck_counter(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)

    created = await service.create_flashcards("u1", deck.id, _cards("ser", "estar", "ir"))

    assert [card.term for card in created] == ["ser", "estar", "ir"]
    assert all(card.deck_id == deck.id for card in created)
    assert await flashcard_count(db_session, deck.id) == 3

    single = await service.create_flashcard("u1", str(deck.id), _cards("tener")[0])
    assert single.is_deleted is False
    assert await flashcard_count(db_session, deck.id) == 4


@pytest.mark.asyncio
async def test_create_flashcard_requires_owner(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)

    with pytest.raises(UnauthorizedError) as exc:
        await service.create_flashcards("intruder", deck.id, _cards("ser"))

    assert exc.value.code == ErrorCode.UNAUTHORIZED_USER
    assert await flashcard_count(db_session, deck.id) == 0


@pytest.mark.asyncio
async def test_create_flashcard_rejects_deleted_deck(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs", is_deleted=True)
    service = _service(db_session)

    with pytest.raises(ConflictError) as exc:
        await service.create_flashcards("u1", deck.id, _cards("ser"))

    assert exc.value.code == ErrorCode.DECK_DELETED


@pytest.mark.asyncio
async def test_create_flashcard_rejects_blank_text(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)

    with pytest.raises(ValidationError) as exc:
        await service.create_flashcards(
            "u1",
            deck.id,
            [FlashcardCreate(term="   ", definition="blank")],
        )

    assert exc.value.code == ErrorCode.INVALID_FLASHCARD_DATA


@pytest.mark.asyncio
async def test_soft_delete_toggle_moves_counter_once(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)
    first, _ = await service.create_flashcards("u1", deck.id, _cards("ser", "estar"))

    await service.update_flashcard("u1", deck.id, first.id, FlashcardUpdate(is_deleted=True))
    assert await flashcard_count(db_session, deck.id) == 1

    await service.update_flashcard("u1", deck.id, first.id, FlashcardUpdate(is_deleted=True))
    assert await flashcard_count(db_session, deck.id) == 1

    page = await service.list_flashcards(deck.id, limit=10)
    assert [card.term for card in page.data] == ["estar"]

    restored = await service.update_flashcard(
        "u1",
        deck.id,
        first.id,
        FlashcardUpdate(is_deleted=False),
    )
    assert restored.is_deleted is False
    assert await flashcard_count(db_session, deck.id) == 2


@pytest.mark.asyncio
async def test_update_flashcard_edits_text(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)
    (card,) = await service.create_flashcards("u1", deck.id, _cards("ser"))

    updated = await service.update_flashcard(
        "u1",
        deck.id,
        card.id,
        FlashcardUpdate(definition="  to be  ", is_starred=True),
    )

    assert updated.definition == "to be"
    assert updated.is_starred is True
    assert await flashcard_count(db_session, deck.id) == 1


@pytest.mark.asyncio
async def test_update_flashcard_validation(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)
    (card,) = await service.create_flashcards("u1", deck.id, _cards("ser"))

    with pytest.raises(ValidationError) as empty:
        await service.update_flashcard("u1", deck.id, card.id, FlashcardUpdate())
    with pytest.raises(ValidationError) as blank:
        await service.update_flashcard("u1", deck.id, card.id, FlashcardUpdate(term=" "))
    with pytest.raises(NotFoundError) as missing:
        await service.update_flashcard(
            "u1",
            deck.id,
            uuid.uuid4(),
            FlashcardUpdate(is_starred=True),
        )

    assert empty.value.code == ErrorCode.INVALID_UPDATE_DATA
    assert blank.value.code == ErrorCode.INVALID_FLASHCARD_DATA
    assert missing.value.code == ErrorCode.FLASHCARD_NOT_FOUND


@pytest.mark.asyncio
async def test_delete_flashcards_skips_unknown_and_counts_active_only(
    db_session: AsyncSession,
) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)
    hidden, active, kept = await service.create_flashcards(
        "u1",
        deck.id,
        _cards("ser", "estar", "ir"),
    )
    await service.update_flashcard("u1", deck.id, hidden.id, FlashcardUpdate(is_deleted=True))
    assert await flashcard_count(db_session, deck.id) == 2

    removed = await service.delete_flashcards(
        "u1",
        deck.id,
        [str(hidden.id), active.id, uuid.uuid4()],
    )

    assert removed == 2
    assert await flashcard_count(db_session, deck.id) == 1
    remaining = await service.list_all_flashcards(deck.id)
    assert [card.id for card in remaining] == [kept.id]


@pytest.mark.asyncio
async def test_delete_flashcards_counter_floor(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Drifted", flashcard_count=0)
    first = await add_flashcard(db_session, deck, term="uno")
    second = await add_flashcard(db_session, deck, term="dos", offset_minutes=1)
    service = _service(db_session)

    removed = await service.delete_flashcards("u1", deck.id, [first.id, second.id])

    assert removed == 2
    assert await flashcard_count(db_session, deck.id) == 0


@pytest.mark.asyncio
async def test_delete_flashcards_removes_generated_questions(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)
    doomed, survivor = await service.create_flashcards("u1", deck.id, _cards("ser", "ir"))
    quiz = Quiz(id=uuid.uuid4(), associated_deck_id=deck.id)
    db_session.add(quiz)
    db_session.add_all(
        [
            QuestionAndAnswer(
                quiz_id=quiz.id,
                related_flashcard_id=doomed.id,
                question="ser?",
                answer="to be",
            ),
            QuestionAndAnswer(
                quiz_id=quiz.id,
                related_flashcard_id=survivor.id,
                question="ir?",
                answer="to go",
            ),
        ]
    )
    await db_session.flush()

    await service.delete_flashcards("u1", deck.id, [doomed.id])

    questions = await count_rows(db_session, QuestionAndAnswer)
    assert questions == 1


@pytest.mark.asyncio
async def test_delete_flashcards_rejects_bad_input(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)

    with pytest.raises(ValidationError) as empty:
        await service.delete_flashcards("u1", deck.id, [])
    with pytest.raises(ValidationError) as single:
        await service.delete_flashcards("u1", deck.id, "not-a-list")  # type: ignore[arg-type]

    assert empty.value.code == ErrorCode.INVALID_FLASHCARD_IDS
    assert single.value.code == ErrorCode.INVALID_FLASHCARD_IDS


@pytest.mark.asyncio
async def test_delete_flashcards_skips_malformed_ids(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)
    doomed, kept = await service.create_flashcards("u1", deck.id, _cards("ser", "ir"))

    removed = await service.delete_flashcards("u1", deck.id, [doomed.id, "not-a-real-id", ""])

    assert removed == 1
    assert await flashcard_count(db_session, deck.id) == 1
    remaining = await service.list_all_flashcards(deck.id)
    assert [card.id for card in remaining] == [kept.id]
    assert await service.delete_flashcards("u1", deck.id, ["nope"]) == 0


@pytest.mark.asyncio
async def test_flashcard_changes_require_owner(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Verbs")
    service = _service(db_session)
    first, second = await service.create_flashcards("u1", deck.id, _cards("ser", "ir"))

    with pytest.raises(UnauthorizedError) as update_exc:
        await service.update_flashcard(
            "intruder",
            deck.id,
            first.id,
            FlashcardUpdate(term="hacked", is_deleted=True),
        )
    with pytest.raises(UnauthorizedError) as delete_exc:
        await service.delete_flashcards("intruder", deck.id, [first.id, second.id])

    assert update_exc.value.code == ErrorCode.UNAUTHORIZED_USER
    assert delete_exc.value.code == ErrorCode.UNAUTHORIZED_USER
    assert await flashcard_count(db_session, deck.id) == 2
    remaining = await service.list_all_flashcards(deck.id)
    assert sorted(card.term for card in remaining) == ["ir", "ser"]


@pytest.mark.asyncio
async def test_random_flashcards_default_to_half_the_pool(db_session: AsyncSession) -> None:
    deck = await add_deck(db_session, owner_id="u1", title="Numbers")
    for index in range(7):
        await add_flashcard(db_session, deck, term=f"card {index}", offset_minutes=index)
    service = _service(db_session)

    sample = await service.get_random_flashcards(deck.id)

    assert len(sample) == 4
    assert len({card.id for card in sample}) == 4


@pytest.mark.asyncio
async def test_random_flashcards_validation(db_session: AsyncSession) -> None:
    small = await add_deck(db_session, owner_id="u1", title="Small")
    large = await add_deck(db_session, owner_id="u1", title="Large")
    for index in range(4):
        await add_flashcard(db_session, small, term=f"s{index}", offset_minutes=index)
    for index in range(6):
        await add_flashcard(db_session, large, term=f"l{index}", offset_minutes=index)
    service = _service(db_session)

    with pytest.raises(ValidationError) as too_small:
        await service.get_random_flashcards(small.id)
    with pytest.raises(ValidationError) as too_many:
        await service.get_random_flashcards(large.id, 7)
    with pytest.raises(ValidationError) as zero:
        await service.get_random_flashcards(large.id, 0)

    assert too_small.value.code == ErrorCode.NOT_ENOUGH_FLASHCARDS
    assert too_many.value.code == ErrorCode.EXCEEDS_AVAILABLE_CARDS
    assert zero.value.code == ErrorCode.INVALID_LIMIT_VALUE
    assert len(await service.get_random_flashcards(large.id, 6)) == 6


@pytest.mark.asyncio
async def test_listing_unknown_deck(db_session: AsyncSession) -> None:
    service = _service(db_session)

    with pytest.raises(NotFoundError) as missing:
        await service.list_flashcards(uuid.uuid4(), limit=10)
    with pytest.raises(ValidationError) as malformed:
        await service.get_flashcard("not-a-deck", uuid.uuid4())

    assert missing.value.code == ErrorCode.DECK_NOT_FOUND
    assert malformed.value.code == ErrorCode.INVALID_DECK_ID
