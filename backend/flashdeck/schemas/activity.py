"""Schemas for study activity and quiz attempt records."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator

from flashdeck.models.activity import DeckActivityType, QuizType
from flashdeck.schemas.common import aware_or_none
from flashdeck.schemas.deck import DeckRecord


class DeckActivityRecord(BaseModel):
    id: UUID
    user_id: str
    deck_id: UUID
    event_type: DeckActivityType
    occurred_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("occurred_at", mode="after")
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        return aware_or_none(value)


class LatestDeckActivity(BaseModel):
    """Most recent activity joined with the deck it happened on."""

    activity: DeckActivityRecord
    deck: DeckRecord


class QuizAttemptRecord(BaseModel):
    id: UUID
    user_id: str
    deck_id: UUID
    quiz_type: QuizType
    score: int
    total_questions: int
    correct_question_ids: list[str]
    incorrect_question_ids: list[str]
    attempted_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("attempted_at", mode="after")
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        return aware_or_none(value)


class LatestQuizAttempt(BaseModel):
    """Most recent quiz attempt. ``deck`` is None when the deck has since been removed."""

    attempt: QuizAttemptRecord
    deck: DeckRecord | None = None


class SearchLogRecord(BaseModel):
    id: UUID
    user_id: str
    search_query: str
    searched_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("searched_at", mode="after")
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        return aware_or_none(value)


__all__ = [
    "DeckActivityRecord",
    "LatestDeckActivity",
    "LatestQuizAttempt",
    "QuizAttemptRecord",
    "SearchLogRecord",
]
