"""Batch resolution of owner IDs to display names."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from flashdeck.models.deck import Deck
from flashdeck.repositories.user import UserRepository
from flashdeck.schemas.deck import DeckRecord

logger = logging.getLogger("flashdeck.services.owner_names")

UNKNOWN_OWNER_NAME = "user not found"


class OwnerNameResolver:
    """Resolve owner names in small batches, tolerating unknown users."""

    BATCH_SIZE = 10

    def __init__(self, user_repo: UserRepository) -> None:
        self.user_repo = user_repo

    async def resolve(self, owner_ids: Iterable[str]) -> dict[str, str]:
        """Return a name for every non-blank ID, using a sentinel for unknown users."""
        unique_ids = list(dict.fromkeys(i for i in owner_ids if isinstance(i, str) and i.strip()))
        names: dict[str, str] = {}
        for start in range(0, len(unique_ids), self.BATCH_SIZE):
            batch = unique_ids[start : start + self.BATCH_SIZE]
            names.update(await self.user_repo.names_for(batch))

        missing = [owner_id for owner_id in unique_ids if owner_id not in names]
        if missing:
            logger.info("Owner names unresolved", extra={"owner_ids": missing})
        for owner_id in missing:
            names[owner_id] = UNKNOWN_OWNER_NAME
        return names

    async def to_records(self, decks: Sequence[Deck]) -> list[DeckRecord]:
        names = await self.resolve(deck.owner_id for deck in decks)
        return [DeckRecord.from_model(deck, names.get(deck.owner_id)) for deck in decks]


__all__ = ["OwnerNameResolver", "UNKNOWN_OWNER_NAME"]
