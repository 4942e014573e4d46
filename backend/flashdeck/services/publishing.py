"""Deck privacy workflow: owners ask to publish, moderators decide."""

from __future__ import annotations

import logging
import uuid

from flashdeck.core.clock import current_timestamp
from flashdeck.core.errors import ConflictError, ErrorCode, NotFoundError, ValidationError
from flashdeck.models.deck import DeckPublishRequest, PublishRequestStatus
from flashdeck.repositories.publish_request import PublishRequestRepository
from flashdeck.schemas.deck import DeckRecord, DeckUpdate, DeckUpdateResult, DeckUpdateStatus
from flashdeck.services.deck import DeckService
from flashdeck.services.moderation import ModerationClient
from flashdeck.utils.validation import parse_deck_id

logger = logging.getLogger("flashdeck.services.publishing")


class DeckPublishingService:
    """Route owner updates through the publish state machine.

    A private deck asked to become public gets a pending publish request and a
    moderation notification instead of an immediate flip. Every other change
    is applied directly.
    """

    def __init__(
        self,
        deck_service: DeckService,
        publish_repo: PublishRequestRepository,
        moderation: ModerationClient,
    ) -> None:
        self.deck_service = deck_service
        self.publish_repo = publish_repo
        self.moderation = moderation

    async def update_deck(
        self,
        acting_user_id: str,
        deck_id: uuid.UUID | str,
        update: DeckUpdate,
        *,
        access_token: str = "",
    ) -> DeckUpdateResult:
        patch = update.to_patch()
        if not patch:
            raise ValidationError(
                ErrorCode.INVALID_UPDATE_DATA,
                "No valid fields were provided for the update.",
            )

        deck = await self.deck_service.get_owned_deck(acting_user_id, deck_id)
        if patch.get("is_private") is True:
            await self._withdraw_pending(deck.id)
        if not (patch.get("is_private") is False and deck.is_private):
            record = await self.deck_service.update_deck(acting_user_id, deck.id, update)
            return DeckUpdateResult(deck=record, status=DeckUpdateStatus.UPDATED)

        if await self.publish_repo.get_pending(deck.id) is not None:
            raise ConflictError(
                ErrorCode.PUBLISH_REQUEST_ALREADY_PENDING,
                "A publish request for this deck is already awaiting review.",
                details={"deck_id": str(deck.id)},
            )

        remaining = {key: value for key, value in patch.items() if key != "is_private"}
        if remaining:
            await self.deck_service.apply_patch(deck, remaining)

        await self.publish_repo.add(
            DeckPublishRequest(deck_id=deck.id, user_id=deck.owner_id),
            operation="create_publish_request",
        )
        await self.publish_repo.session.commit()

        self.moderation.notify(user_id=deck.owner_id, access_token=access_token, deck_id=deck.id)
        logger.info("Publish request submitted", extra={"deck_id": str(deck.id)})

        records = await self.deck_service.owner_names.to_records([deck])
        return DeckUpdateResult(deck=records[0], status=DeckUpdateStatus.PUBLISH_REQUEST_PENDING)

    async def resolve_publish_request(self, deck_id: uuid.UUID | str, approved: bool) -> DeckRecord:
        """Close the pending request; approval makes the deck public."""
        parsed = parse_deck_id(deck_id)
        request = await self.publish_repo.get_pending(parsed)
        if request is None:
            raise NotFoundError(
                ErrorCode.PUBLISH_REQUEST_NOT_FOUND,
                f"No pending publish request for deck {parsed}.",
            )

        deck = await self.deck_service.deck_repo.get(parsed)
        if deck is None:
            raise NotFoundError(ErrorCode.DECK_NOT_FOUND, f"Deck {parsed} does not exist.")

        request.status = (
            PublishRequestStatus.APPROVED if approved else PublishRequestStatus.REJECTED
        )
        request.resolved_at = current_timestamp()
        if approved:
            deck.is_private = False

        with self.publish_repo.storage_errors("resolve_publish_request", parsed):
            await self.publish_repo.session.flush()
        await self.publish_repo.session.commit()

        logger.info(
            "Publish request resolved",
            extra={"deck_id": str(parsed), "status": request.status.value},
        )
        records = await self.deck_service.owner_names.to_records([deck])
        return records[0]

    async def _withdraw_pending(self, deck_id: uuid.UUID) -> None:
        # An owner going private supersedes any review still in flight.
        request = await self.publish_repo.get_pending(deck_id)
        if request is None:
            return
        request.status = PublishRequestStatus.REJECTED
        request.resolved_at = current_timestamp()
        with self.publish_repo.storage_errors("withdraw_publish_request", deck_id):
            await self.publish_repo.session.flush()
        logger.info("Pending publish request withdrawn", extra={"deck_id": str(deck_id)})


__all__ = ["DeckPublishingService"]
