"""Builders wiring repositories and services for a single unit of work."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.core.config import Settings, settings
from flashdeck.repositories import (
    DeckActivityRepository,
    DeckRepository,
    FlashcardRepository,
    PublishRequestRepository,
    QuizAttemptRepository,
    QuizRepository,
    SavedDeckRepository,
    SearchLogRepository,
    UserRepository,
)
from flashdeck.services import (
    ActivityService,
    DeckPublishingService,
    DeckService,
    EmbeddingService,
    FlashcardService,
    ModerationClient,
    OwnerNameResolver,
    SearchService,
)


@dataclass(slots=True)
class DeckCore:
    """Services sharing one AsyncSession."""

    decks: DeckService
    flashcards: FlashcardService
    search: SearchService
    publishing: DeckPublishingService
    activity: ActivityService


def build_embedding_service(config: Settings = settings) -> EmbeddingService:
    """Factory helper for EmbeddingService."""
    return EmbeddingService(
        api_key=config.openai_api_key.get_secret_value(),
        model=config.embedding_model,
        dimensions=config.embedding_dimensions,
        default_timeout=config.embedding_timeout_seconds,
    )


def build_moderation_client(config: Settings = settings) -> ModerationClient:
    """Factory helper for ModerationClient."""
    return ModerationClient(
        webhook_url=config.moderation_webhook_url,
        timeout=config.moderation_timeout_seconds,
    )


def build_deck_core(
    session: AsyncSession,
    *,
    embedding_service: EmbeddingService,
    moderation: ModerationClient,
    config: Settings = settings,
) -> DeckCore:
    """Assemble every deck-core service around ``session``."""
    deck_repo = DeckRepository(session)
    saved_repo = SavedDeckRepository(session)
    flashcard_repo = FlashcardRepository(session)
    quiz_repo = QuizRepository(session)
    publish_repo = PublishRequestRepository(session)
    search_log_repo = SearchLogRepository(session)
    owner_names = OwnerNameResolver(UserRepository(session))

    flashcards = FlashcardService(flashcard_repo, deck_repo, quiz_repo)
    decks = DeckService(
        deck_repo,
        saved_repo,
        owner_names,
        embedding_service=embedding_service,
        flashcard_repo=flashcard_repo,
        quiz_repo=quiz_repo,
        publish_repo=publish_repo,
        flashcard_service=flashcards,
        default_cover_photo=config.default_cover_photo_url,
    )
    search = SearchService(
        deck_repo,
        saved_repo,
        search_log_repo,
        owner_names,
        embedding_service,
        distance_threshold=config.search_distance_threshold,
        default_limit=config.search_result_limit,
        history_size=config.recommendation_history_size,
    )
    publishing = DeckPublishingService(decks, publish_repo, moderation)
    activity = ActivityService(
        search_log_repo,
        DeckActivityRepository(session),
        QuizAttemptRepository(session),
        deck_repo,
        owner_names,
    )
    return DeckCore(
        decks=decks,
        flashcards=flashcards,
        search=search,
        publishing=publishing,
        activity=activity,
    )


__all__ = ["DeckCore", "build_deck_core", "build_embedding_service", "build_moderation_client"]
