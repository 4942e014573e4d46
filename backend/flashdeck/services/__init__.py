"""Domain services coordinating repositories and external adapters."""

from flashdeck.services.activity import ActivityService
from flashdeck.services.deck import DeckService
from flashdeck.services.embedding import EmbeddingPurpose, EmbeddingService
from flashdeck.services.flashcard import FlashcardService
from flashdeck.services.moderation import ModerationClient
from flashdeck.services.owner_names import UNKNOWN_OWNER_NAME, OwnerNameResolver
from flashdeck.services.publishing import DeckPublishingService
from flashdeck.services.search import SearchService, average_vectors, merge_search_results

__all__ = [
    "ActivityService",
    "DeckPublishingService",
    "DeckService",
    "EmbeddingPurpose",
    "EmbeddingService",
    "FlashcardService",
    "ModerationClient",
    "OwnerNameResolver",
    "SearchService",
    "UNKNOWN_OWNER_NAME",
    "average_vectors",
    "merge_search_results",
]
