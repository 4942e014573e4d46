"""Flashcard service covering listing, sampling, creation, updates and deletion."""

from __future__ import annotations

import logging
import math
import random
import uuid
from collections.abc import Sequence

from flashdeck.core.errors import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from flashdeck.models.deck import Deck
from flashdeck.models.flashcard import Flashcard
from flashdeck.repositories.deck import DeckRepository
from flashdeck.repositories.flashcard import FlashcardRepository
from flashdeck.repositories.quiz import QuizRepository
from flashdeck.schemas.flashcard import (
    FlashcardCreate,
    FlashcardPage,
    FlashcardRecord,
    FlashcardUpdate,
)
from flashdeck.utils.validation import (
    parse_deck_id,
    parse_flashcard_id,
    require_user_id,
    validate_limit,
)

logger = logging.getLogger("flashdeck.services.flashcards")


class FlashcardService:
    """Coordinate flashcard lifecycle operations and the parent deck counter."""

    MIN_RANDOM_POOL = 5
    DEFAULT_SAMPLE_RATIO = 0.5

    def __init__(
        self,
        flashcard_repo: FlashcardRepository,
        deck_repo: DeckRepository,
        quiz_repo: QuizRepository | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.flashcard_repo = flashcard_repo
        self.deck_repo = deck_repo
        self.quiz_repo = quiz_repo
        self._rng = rng or random.Random()

    #
    # Query operations
    #
    async def list_flashcards(
        self,
        deck_id: uuid.UUID | str,
        *,
        limit: int,
        cursor: str | None = None,
    ) -> FlashcardPage:
        """Return non-deleted flashcards of a deck ordered by creation time."""
        deck = await self._get_deck(deck_id)
        safe_limit = validate_limit(limit)
        flashcards, next_token = await self.flashcard_repo.list_page(
            deck.id,
            limit=safe_limit,
            cursor=cursor,
        )
        return FlashcardPage(
            data=[FlashcardRecord.model_validate(card) for card in flashcards],
            next_page_token=next_token,
        )

    async def list_all_flashcards(self, deck_id: uuid.UUID | str) -> list[FlashcardRecord]:
        deck = await self._get_deck(deck_id)
        flashcards = await self.flashcard_repo.list_active(deck.id)
        return [FlashcardRecord.model_validate(card) for card in flashcards]

    async def get_random_flashcards(
        self,
        deck_id: uuid.UUID | str,
        count: int | None = None,
    ) -> list[FlashcardRecord]:
        """Return a uniform random sample of the deck's flashcards.

        The deck needs at least five flashcards. Without ``count`` half of the
        pool (rounded up) is returned.
        """
        pool = await self.list_all_flashcards(deck_id)
        if len(pool) < self.MIN_RANDOM_POOL:
            raise ValidationError(
                ErrorCode.NOT_ENOUGH_FLASHCARDS,
                "Not enough flashcards to randomize and select.",
                details={"available": len(pool), "required": self.MIN_RANDOM_POOL},
            )

        if count is None:
            count = math.ceil(len(pool) * self.DEFAULT_SAMPLE_RATIO)
        if isinstance(count, bool) or not isinstance(count, int) or count < 1:
            raise ValidationError(
                ErrorCode.INVALID_LIMIT_VALUE,
                "Number of flashcards must be a positive integer.",
            )
        if count > len(pool):
            raise ValidationError(
                ErrorCode.EXCEEDS_AVAILABLE_CARDS,
                "Requested number of flashcards exceeds available cards.",
                details={"requested": count, "available": len(pool)},
            )
        return self._rng.sample(pool, count)

    async def get_flashcard(
        self,
        deck_id: uuid.UUID | str,
        flashcard_id: uuid.UUID | str,
    ) -> FlashcardRecord:
        deck = await self._get_deck(deck_id)
        flashcard = await self._get_flashcard(deck.id, flashcard_id)
        return FlashcardRecord.model_validate(flashcard)

    #
    # Mutating operations
    #
    async def create_flashcard(
        self,
        acting_user_id: str,
        deck_id: uuid.UUID | str,
        payload: FlashcardCreate,
    ) -> FlashcardRecord:
        created = await self.create_flashcards(acting_user_id, deck_id, [payload])
        return created[0]

    async def create_flashcards(
        self,
        acting_user_id: str,
        deck_id: uuid.UUID | str,
        payloads: Sequence[FlashcardCreate],
        *,
        commit: bool = True,
    ) -> list[FlashcardRecord]:
        """Insert flashcards and raise the deck counter by the number created."""
        if not payloads:
            raise ValidationError(
                ErrorCode.INVALID_FLASHCARD_DATA,
                "At least one flashcard is required.",
            )
        for payload in payloads:
            _validate_flashcard_text(payload.term, payload.definition)

        deck = await self._get_writable_deck(acting_user_id, deck_id)

        flashcards = [
            Flashcard(
                deck_id=deck.id,
                term=payload.term.strip(),
                definition=payload.definition.strip(),
                is_starred=payload.is_starred,
                is_deleted=False,
            )
            for payload in payloads
        ]
        await self.flashcard_repo.add_all(flashcards, operation="create_flashcards")
        await self.deck_repo.adjust_flashcard_count(deck.id, len(flashcards))
        if commit:
            await self.flashcard_repo.session.commit()

        logger.info(
            "Flashcards created",
            extra={"deck_id": str(deck.id), "count": len(flashcards)},
        )
        return [FlashcardRecord.model_validate(card) for card in flashcards]

    async def update_flashcard(
        self,
        acting_user_id: str,
        deck_id: uuid.UUID | str,
        flashcard_id: uuid.UUID | str,
        update: FlashcardUpdate,
    ) -> FlashcardRecord:
        """Apply a partial update; toggling ``is_deleted`` moves the deck counter."""
        patch = update.to_patch()
        if not patch:
            raise ValidationError(
                ErrorCode.INVALID_UPDATE_DATA,
                "No valid fields were provided for the update.",
            )
        for field in ("term", "definition"):
            if field in patch and not str(patch[field]).strip():
                raise ValidationError(
                    ErrorCode.INVALID_FLASHCARD_DATA,
                    f"Flashcard {field} must not be blank.",
                )

        deck = await self._get_writable_deck(acting_user_id, deck_id)
        flashcard = await self._get_flashcard(deck.id, flashcard_id)

        delta = 0
        if "is_deleted" in patch and patch["is_deleted"] != flashcard.is_deleted:
            delta = -1 if patch["is_deleted"] else 1

        for field, value in patch.items():
            if isinstance(value, str):
                value = value.strip()
            setattr(flashcard, field, value)

        with self.flashcard_repo.storage_errors("update_flashcard", flashcard.id):
            await self.flashcard_repo.session.flush()
        await self.deck_repo.adjust_flashcard_count(deck.id, delta)
        await self.flashcard_repo.session.commit()
        return FlashcardRecord.model_validate(flashcard)

    async def delete_flashcards(
        self,
        acting_user_id: str,
        deck_id: uuid.UUID | str,
        flashcard_ids: Sequence[uuid.UUID | str],
    ) -> int:
        """Hard-delete flashcards, skipping IDs that are malformed or do not exist.

        Returns the number of flashcards actually removed. The deck counter is
        lowered by that number and never drops below zero.
        """
        if (
            isinstance(flashcard_ids, (str, bytes))
            or not isinstance(flashcard_ids, Sequence)
            or not flashcard_ids
        ):
            raise ValidationError(
                ErrorCode.INVALID_FLASHCARD_IDS,
                "Flashcard IDs must be a non-empty list.",
            )

        deck = await self._get_writable_deck(acting_user_id, deck_id)
        parsed_ids: list[uuid.UUID] = []
        for raw_id in flashcard_ids:
            try:
                parsed_ids.append(parse_flashcard_id(raw_id))
            except ValidationError:
                logger.warning(
                    "Skipping invalid flashcard ID",
                    extra={"deck_id": str(deck.id), "flashcard_id": str(raw_id)},
                )

        existing = await self.flashcard_repo.list_existing(deck.id, parsed_ids)
        if not existing:
            logger.info("No flashcards to delete", extra={"deck_id": str(deck.id)})
            return 0

        removed_ids = [card.id for card in existing]
        active_removed = sum(1 for card in existing if not card.is_deleted)
        if self.quiz_repo is not None:
            await self.quiz_repo.delete_questions_for_flashcards(removed_ids)
        await self.flashcard_repo.delete_many(existing)
        await self.deck_repo.adjust_flashcard_count(deck.id, -active_removed)
        await self.flashcard_repo.session.commit()

        logger.info(
            "Flashcards deleted",
            extra={"deck_id": str(deck.id), "count": len(removed_ids)},
        )
        return len(removed_ids)

    #
    # Helpers
    #
    async def _get_deck(self, deck_id: uuid.UUID | str) -> Deck:
        parsed = parse_deck_id(deck_id)
        deck = await self.deck_repo.get(parsed)
        if deck is None:
            raise NotFoundError(ErrorCode.DECK_NOT_FOUND, f"Deck {parsed} does not exist.")
        return deck

    async def _get_writable_deck(self, acting_user_id: str, deck_id: uuid.UUID | str) -> Deck:
        user_id = require_user_id(acting_user_id)
        deck = await self._get_deck(deck_id)
        if deck.owner_id != user_id:
            raise UnauthorizedError(
                "Only the owner of the deck can modify its flashcards.",
                details={"deck_id": str(deck.id)},
            )
        if deck.is_deleted:
            raise ConflictError(
                ErrorCode.DECK_DELETED,
                "Flashcards of a deleted deck cannot be modified.",
                details={"deck_id": str(deck.id)},
            )
        return deck

    async def _get_flashcard(
        self,
        deck_id: uuid.UUID,
        flashcard_id: uuid.UUID | str,
    ) -> Flashcard:
        parsed = parse_flashcard_id(flashcard_id)
        flashcard = await self.flashcard_repo.get(deck_id, parsed)
        if flashcard is None:
            raise NotFoundError(
                ErrorCode.FLASHCARD_NOT_FOUND,
                f"Flashcard {parsed} does not exist.",
            )
        return flashcard


def _validate_flashcard_text(term: str, definition: str) -> None:
    if not term.strip() or not definition.strip():
        raise ValidationError(
            ErrorCode.INVALID_FLASHCARD_DATA,
            "Flashcard term and definition must not be blank.",
        )


__all__ = ["FlashcardService"]
