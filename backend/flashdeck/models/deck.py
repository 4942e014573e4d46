"""Deck models: decks, saved-deck bookmarks and publish requests."""

from __future__ import annotations

import enum
import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from flashdeck.core.clock import current_timestamp
from flashdeck.models.base import GUID, Base, CreatedAtMixin, EmbeddingVector, SoftDeleteMixin


class Deck(SoftDeleteMixin, CreatedAtMixin, Base):
    """A titled collection of flashcards owned by a single user."""

    __tablename__ = "decks"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_private: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )
    cover_photo: Mapped[str] = mapped_column(Text, nullable=False)

    flashcard_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
    )
    embedding_field: Mapped[list[float] | None] = mapped_column(EmbeddingVector())

    original_deck_id: Mapped[uuid.UUID | None] = mapped_column(GUID())
    made_to_quiz_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    flashcards = relationship(
        "Flashcard",
        back_populates="deck",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_decks_owner_title", "owner_id", "is_deleted", "title"),
        Index("ix_decks_owner_created", "owner_id", "is_deleted", "created_at"),
        Index("ix_decks_public_title", "is_private", "is_deleted", "title"),
    )


class SavedDeck(Base):
    """Bookmark of a public deck by a user other than its owner."""

    __tablename__ = "saved_decks"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    # No foreign key: a saved entry outlives its deck and is skipped on listing.
    deck_id: Mapped[uuid.UUID] = mapped_column(GUID(), nullable=False)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    saved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=current_timestamp,
    )

    __table_args__ = (
        UniqueConstraint("deck_id", "user_id", name="uq_saved_decks_deck_user"),
        Index("ix_saved_decks_user_saved_at", "user_id", "saved_at"),
    )


class PublishRequestStatus(str, enum.Enum):
    """Lifecycle of a request to make a private deck public."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class DeckPublishRequest(Base):
    """Pending or resolved moderation request for publishing a deck."""

    __tablename__ = "deck_publish_requests"

    id: Mapped[uuid.UUID] = mapped_column(GUID(), primary_key=True, default=uuid.uuid4)
    deck_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("decks.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    status: Mapped[PublishRequestStatus] = mapped_column(
        Enum(
            PublishRequestStatus,
            name="publish_request_status_enum",
            native_enum=False,
            validate_strings=True,
        ),
        nullable=False,
        default=PublishRequestStatus.PENDING,
    )
    requested_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=current_timestamp,
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    __table_args__ = (Index("ix_deck_publish_requests_deck_status", "deck_id", "status"),)


__all__ = ["Deck", "DeckPublishRequest", "PublishRequestStatus", "SavedDeck"]
