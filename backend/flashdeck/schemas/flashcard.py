"""Schemas for flashcard records and flashcard mutations."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flashdeck.schemas.common import aware_or_none


class FlashcardRecord(BaseModel):
    id: UUID
    deck_id: UUID
    term: str
    definition: str
    is_deleted: bool
    is_starred: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at", mode="after")
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        return aware_or_none(value)


class FlashcardPage(BaseModel):
    data: list[FlashcardRecord] = Field(default_factory=list)
    next_page_token: str | None = None


class FlashcardCreate(BaseModel):
    term: str
    definition: str
    is_starred: bool = False


class FlashcardUpdate(BaseModel):
    """Partial flashcard update. Toggling is_deleted adjusts the deck counter."""

    term: str | None = None
    definition: str | None = None
    is_starred: bool | None = None
    is_deleted: bool | None = None

    model_config = ConfigDict(extra="forbid")

    def to_patch(self) -> dict[str, object]:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None
        }


__all__ = ["FlashcardCreate", "FlashcardPage", "FlashcardRecord", "FlashcardUpdate"]
