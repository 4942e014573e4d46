"""Deck service covering listings, lifecycle mutations and saved decks."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence

from flashdeck.core.config import DEFAULT_COVER_PHOTO_URL
from flashdeck.core.errors import (
    ConflictError,
    ErrorCode,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from flashdeck.models.deck import Deck, SavedDeck
from flashdeck.repositories.deck import DeckRepository, SavedDeckRepository
from flashdeck.repositories.flashcard import FlashcardRepository
from flashdeck.repositories.publish_request import PublishRequestRepository
from flashdeck.repositories.quiz import QuizRepository
from flashdeck.schemas.common import OrderBy
from flashdeck.schemas.deck import DeckCreate, DeckPage, DeckRecord, DeckUpdate
from flashdeck.services.embedding import EmbeddingService
from flashdeck.services.flashcard import FlashcardService
from flashdeck.services.owner_names import UNKNOWN_OWNER_NAME, OwnerNameResolver
from flashdeck.utils.text import clean_title
from flashdeck.utils.validation import (
    parse_deck_id,
    require_user_id,
    validate_limit,
    validate_order_by,
)

logger = logging.getLogger("flashdeck.services.decks")


class DeckService:
    """Coordinate deck operations using repositories and the embedding adapter."""

    def __init__(
        self,
        deck_repo: DeckRepository,
        saved_repo: SavedDeckRepository,
        owner_names: OwnerNameResolver,
        *,
        embedding_service: EmbeddingService | None = None,
        flashcard_repo: FlashcardRepository | None = None,
        quiz_repo: QuizRepository | None = None,
        publish_repo: PublishRequestRepository | None = None,
        flashcard_service: FlashcardService | None = None,
        default_cover_photo: str = DEFAULT_COVER_PHOTO_URL,
    ) -> None:
        self.deck_repo = deck_repo
        self.saved_repo = saved_repo
        self.owner_names = owner_names
        self.embedding_service = embedding_service
        self.flashcard_repo = flashcard_repo
        self.quiz_repo = quiz_repo
        self.publish_repo = publish_repo
        self.flashcard_service = flashcard_service
        self.default_cover_photo = default_cover_photo

    #
    # Query operations
    #
    async def list_owner_decks(
        self,
        owner_id: str,
        *,
        limit: int,
        cursor: str | None = None,
        order_by: OrderBy | str = OrderBy.TITLE,
    ) -> DeckPage:
        """Return the owner's live decks by title ascending or newest first."""
        return await self._list_for_owner(
            owner_id,
            deleted=False,
            limit=limit,
            cursor=cursor,
            order_by=order_by,
        )

    async def list_owner_deleted_decks(
        self,
        owner_id: str,
        *,
        limit: int,
        cursor: str | None = None,
        order_by: OrderBy | str = OrderBy.TITLE,
    ) -> DeckPage:
        """Return the owner's soft-deleted decks."""
        return await self._list_for_owner(
            owner_id,
            deleted=True,
            limit=limit,
            cursor=cursor,
            order_by=order_by,
        )

    async def list_public_decks(self, *, limit: int, cursor: str | None = None) -> DeckPage:
        safe_limit = validate_limit(limit)
        decks, next_token = await self.deck_repo.list_public(limit=safe_limit, cursor=cursor)
        return DeckPage(data=await self.owner_names.to_records(decks), next_page_token=next_token)

    async def list_saved_decks(
        self,
        user_id: str,
        *,
        limit: int,
        cursor: str | None = None,
    ) -> DeckPage:
        """Return decks the user saved, most recently saved first."""
        resolved_user = require_user_id(user_id)
        safe_limit = validate_limit(limit)
        decks, next_token = await self.saved_repo.list_for_user(
            resolved_user,
            limit=safe_limit,
            cursor=cursor,
        )
        return DeckPage(data=await self.owner_names.to_records(decks), next_page_token=next_token)

    async def get_deck(self, deck_id: uuid.UUID | str) -> DeckRecord:
        deck = await self._get_deck(deck_id)
        records = await self.owner_names.to_records([deck])
        return records[0]

    #
    # Mutating operations
    #
    async def create_deck(self, payload: DeckCreate) -> DeckRecord:
        """
        Create a private deck and embed its title and description.

        Initial flashcards, when provided, are created in the same call and
        counted on the deck.
        """
        if self.embedding_service is None:
            raise RuntimeError("EmbeddingService is required for deck creation.")

        owner_id = require_user_id(payload.owner_id)
        title = clean_title(payload.title)
        if not title:
            raise ValidationError(ErrorCode.INVALID_DECK_DATA, "Deck title must not be blank.")
        description = payload.description.strip()

        owner_name = (await self.owner_names.resolve([owner_id]))[owner_id]
        if owner_name == UNKNOWN_OWNER_NAME:
            raise NotFoundError(ErrorCode.USER_NOT_FOUND, f"User {owner_id} does not exist.")

        embedding = await self.embedding_service.embed_document(f"{title}\n{description}".strip())

        deck = Deck(
            owner_id=owner_id,
            title=title,
            description=description,
            is_private=payload.is_private,
            is_deleted=False,
            cover_photo=(payload.cover_photo or "").strip() or self.default_cover_photo,
            flashcard_count=0,
            embedding_field=embedding,
            original_deck_id=payload.original_deck_id,
        )
        await self.deck_repo.add(deck, operation="create_deck")

        if payload.flashcards:
            if self.flashcard_service is None:
                raise RuntimeError("FlashcardService is required to create initial flashcards.")
            await self.flashcard_service.create_flashcards(
                owner_id,
                deck.id,
                payload.flashcards,
                commit=False,
            )
            await self.deck_repo.refresh(deck)

        await self.deck_repo.session.commit()
        logger.info(
            "Deck created",
            extra={
                "deck_id": str(deck.id),
                "owner_id": owner_id,
                "flashcard_count": deck.flashcard_count,
            },
        )
        return DeckRecord.from_model(deck, owner_name)

    async def update_deck(
        self,
        acting_user_id: str,
        deck_id: uuid.UUID | str,
        update: DeckUpdate,
    ) -> DeckRecord:
        """Apply a field patch to a deck owned by the acting user."""
        patch = update.to_patch()
        if not patch:
            raise ValidationError(
                ErrorCode.INVALID_UPDATE_DATA,
                "No valid fields were provided for the update.",
            )
        deck = await self.get_owned_deck(acting_user_id, deck_id)
        await self.apply_patch(deck, patch)
        await self.deck_repo.session.commit()
        records = await self.owner_names.to_records([deck])
        return records[0]

    async def apply_patch(self, deck: Deck, patch: dict[str, object]) -> Deck:
        """Write patch values onto the deck and flush. The embedding is left untouched."""
        if "title" in patch:
            title = clean_title(str(patch["title"]))
            if not title:
                raise ValidationError(ErrorCode.INVALID_DECK_DATA, "Deck title must not be blank.")
            patch = {**patch, "title": title}
        if "description" in patch:
            patch = {**patch, "description": str(patch["description"]).strip()}

        for field, value in patch.items():
            setattr(deck, field, value)
        with self.deck_repo.storage_errors("update_deck", deck.id):
            await self.deck_repo.session.flush()

        logger.info(
            "Deck updated",
            extra={"deck_id": str(deck.id), "fields": sorted(patch)},
        )
        return deck

    async def delete_decks(
        self,
        acting_user_id: str,
        deck_ids: Sequence[uuid.UUID | str],
    ) -> list[uuid.UUID]:
        """
        Hard-delete the acting user's decks with their flashcards and quizzes.

        Invalid, missing or foreign IDs are skipped with a warning. Each deck is
        committed on its own. Returns the IDs that were removed.
        """
        user_id = require_user_id(acting_user_id)
        if isinstance(deck_ids, (str, bytes)) or not isinstance(deck_ids, Sequence) or not deck_ids:
            raise ValidationError(ErrorCode.INVALID_DECK_IDS, "Deck IDs must be a non-empty list.")

        deleted: list[uuid.UUID] = []
        for raw_id in deck_ids:
            try:
                deck_id = parse_deck_id(raw_id)
            except ValidationError:
                logger.warning("Skipping invalid deck ID", extra={"deck_id": str(raw_id)})
                continue

            deck = await self.deck_repo.get(deck_id)
            if deck is None:
                logger.warning("Skipping missing deck", extra={"deck_id": str(deck_id)})
                continue
            if deck.owner_id != user_id:
                logger.warning(
                    "Skipping deck not owned by user",
                    extra={"deck_id": str(deck_id), "user_id": user_id},
                )
                continue

            await self._delete_with_dependents(deck_id)
            await self.deck_repo.session.commit()
            deleted.append(deck_id)

        logger.info("Decks deleted", extra={"user_id": user_id, "count": len(deleted)})
        return deleted

    async def save_public_deck(self, user_id: str, deck_id: uuid.UUID | str) -> None:
        """Bookmark a public deck owned by someone else."""
        resolved_user = require_user_id(user_id)
        deck = await self._get_deck(deck_id)

        if deck.owner_id == resolved_user:
            raise ConflictError(ErrorCode.CANNOT_SAVE_OWN_DECK, "You cannot save your own deck.")
        if deck.is_deleted:
            raise ConflictError(ErrorCode.DECK_DELETED, "Deleted decks cannot be saved.")
        if deck.is_private:
            raise ConflictError(ErrorCode.DECK_IS_PRIVATE, "Private decks cannot be saved.")
        if await self.saved_repo.get(resolved_user, deck.id) is not None:
            raise ConflictError(ErrorCode.DECK_ALREADY_SAVED, "Deck already saved.")

        await self.saved_repo.add(
            SavedDeck(deck_id=deck.id, user_id=resolved_user),
            operation="save_deck",
        )
        await self.saved_repo.session.commit()
        logger.info("Deck saved", extra={"deck_id": str(deck.id), "user_id": resolved_user})

    async def unsave_deck(self, user_id: str, deck_id: uuid.UUID | str) -> None:
        resolved_user = require_user_id(user_id)
        parsed = parse_deck_id(deck_id)
        saved = await self.saved_repo.get(resolved_user, parsed)
        if saved is None:
            raise NotFoundError(ErrorCode.DECK_NOT_SAVED, "Deck is not saved by this user.")
        await self.saved_repo.remove(saved)
        await self.saved_repo.session.commit()

    #
    # Helpers
    #
    async def get_owned_deck(self, acting_user_id: str, deck_id: uuid.UUID | str) -> Deck:
        user_id = require_user_id(acting_user_id)
        deck = await self._get_deck(deck_id)
        if deck.owner_id != user_id:
            raise UnauthorizedError(
                "Only the owner of the deck can modify it.",
                details={"deck_id": str(deck.id)},
            )
        return deck

    async def _get_deck(self, deck_id: uuid.UUID | str) -> Deck:
        parsed = parse_deck_id(deck_id)
        deck = await self.deck_repo.get(parsed)
        if deck is None:
            raise NotFoundError(ErrorCode.DECK_NOT_FOUND, f"Deck {parsed} does not exist.")
        return deck

    async def _list_for_owner(
        self,
        owner_id: str,
        *,
        deleted: bool,
        limit: int,
        cursor: str | None,
        order_by: OrderBy | str,
    ) -> DeckPage:
        resolved_owner = require_user_id(owner_id)
        safe_limit = validate_limit(limit)
        ordering = validate_order_by(order_by)
        decks, next_token = await self.deck_repo.list_for_owner(
            resolved_owner,
            deleted=deleted,
            limit=safe_limit,
            cursor=cursor,
            order_by=ordering,
        )
        return DeckPage(data=await self.owner_names.to_records(decks), next_page_token=next_token)

    async def _delete_with_dependents(self, deck_id: uuid.UUID) -> None:
        if self.quiz_repo is not None:
            await self.quiz_repo.delete_for_deck(deck_id)
        if self.publish_repo is not None:
            await self.publish_repo.delete_for_deck(deck_id)
        if self.flashcard_repo is not None:
            await self.flashcard_repo.delete_for_deck(deck_id)
        await self.deck_repo.delete(deck_id)


__all__ = ["DeckService"]
