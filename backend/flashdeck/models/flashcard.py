"""Flashcard model nested under a deck."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, ForeignKey, Index, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flashdeck.models.base import GUID, Base, CreatedAtMixin, SoftDeleteMixin


class Flashcard(SoftDeleteMixin, CreatedAtMixin, Base):
    """Term/definition pair belonging to exactly one deck."""

    __tablename__ = "flashcards"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    deck_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("decks.id", ondelete="CASCADE"),
        nullable=False,
    )

    term: Mapped[str] = mapped_column(Text, nullable=False)
    definition: Mapped[str] = mapped_column(Text, nullable=False)
    is_starred: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    deck = relationship("Deck", back_populates="flashcards")

    __table_args__ = (Index("ix_flashcards_deck_created", "deck_id", "is_deleted", "created_at"),)


__all__ = ["Flashcard"]
