"""Repository for deck publish requests awaiting moderation."""

from __future__ import annotations

import uuid

from sqlalchemy import delete, select

from flashdeck.models.deck import DeckPublishRequest, PublishRequestStatus
from flashdeck.repositories.base import BaseRepository


class PublishRequestRepository(BaseRepository[DeckPublishRequest]):
    async def get_pending(self, deck_id: uuid.UUID) -> DeckPublishRequest | None:
        stmt = (
            select(DeckPublishRequest)
            .where(
                DeckPublishRequest.deck_id == deck_id,
                DeckPublishRequest.status == PublishRequestStatus.PENDING,
            )
            .order_by(DeckPublishRequest.requested_at.desc())
            .limit(1)
        )
        with self.storage_errors("get_pending_publish_request", deck_id):
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def delete_for_deck(self, deck_id: uuid.UUID) -> None:
        with self.storage_errors("delete_publish_requests", deck_id):
            await self.session.execute(
                delete(DeckPublishRequest)
                .where(DeckPublishRequest.deck_id == deck_id)
                .execution_options(synchronize_session=False)
            )


__all__ = ["PublishRequestRepository"]
