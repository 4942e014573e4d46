"""Pydantic schemas describing deck records and deck mutations."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flashdeck.models.deck import Deck
from flashdeck.schemas.common import aware_or_none
from flashdeck.schemas.flashcard import FlashcardCreate


class DeckRecord(BaseModel):
    """Deck representation returned to callers. The embedding never leaves the store."""

    id: UUID
    title: str
    description: str
    owner_id: str
    owner_name: str | None = None
    is_private: bool
    is_deleted: bool
    cover_photo: str
    created_at: datetime
    flashcard_count: int
    original_deck_id: UUID | None = None
    made_to_quiz_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", "made_to_quiz_at", mode="after")
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        return aware_or_none(value)

    @classmethod
    def from_model(cls, deck: Deck, owner_name: str | None = None) -> "DeckRecord":
        record = cls.model_validate(deck)
        record.owner_name = owner_name
        return record


class DeckPage(BaseModel):
    """A page of decks plus the cursor for the next page, if any."""

    data: list[DeckRecord] = Field(default_factory=list)
    next_page_token: str | None = None


class DeckCreate(BaseModel):
    """Input for creating a deck, optionally with its first flashcards."""

    owner_id: str
    title: str
    description: str = ""
    cover_photo: str | None = None
    is_private: bool = True
    original_deck_id: UUID | None = None
    flashcards: list[FlashcardCreate] = Field(default_factory=list)


class DeckUpdate(BaseModel):
    """Partial deck update. Only fields explicitly provided are applied."""

    title: str | None = None
    description: str | None = None
    is_private: bool | None = None
    cover_photo: str | None = None
    is_deleted: bool | None = None

    model_config = ConfigDict(extra="forbid")

    def to_patch(self) -> dict[str, object]:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


class DeckUpdateStatus(str, Enum):
    UPDATED = "UPDATED"
    PUBLISH_REQUEST_PENDING = "PUBLISH_REQUEST_PENDING"


class DeckUpdateResult(BaseModel):
    """Outcome of an owner update, including the publishing state when relevant."""

    deck: DeckRecord
    status: DeckUpdateStatus = DeckUpdateStatus.UPDATED


__all__ = [
    "DeckCreate",
    "DeckPage",
    "DeckRecord",
    "DeckUpdate",
    "DeckUpdateResult",
    "DeckUpdateStatus",
]
