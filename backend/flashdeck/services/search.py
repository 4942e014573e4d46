"""Hybrid deck search and query-history recommendations."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import numpy as np

from flashdeck.core.errors import ErrorCode, ValidationError
from flashdeck.models.deck import Deck
from flashdeck.repositories.activity import SearchLogRepository
from flashdeck.repositories.deck import DeckRepository, SavedDeckRepository
from flashdeck.schemas.deck import DeckRecord
from flashdeck.schemas.search import SearchScope
from flashdeck.services.embedding import EmbeddingService
from flashdeck.services.owner_names import OwnerNameResolver
from flashdeck.utils.text import clean_title, is_valid_search_query
from flashdeck.utils.validation import require_user_id

logger = logging.getLogger("flashdeck.services.search")


def merge_search_results(
    exact: Sequence[Deck],
    nearest: Sequence[Deck],
    limit: int,
) -> list[Deck]:
    """Exact title matches first, then unseen vector matches, capped at ``limit``."""
    seen = {deck.id for deck in exact}
    merged = list(exact)
    for deck in nearest:
        if deck.id in seen:
            continue
        seen.add(deck.id)
        merged.append(deck)
    return merged[:limit]


def average_vectors(vectors: Sequence[Sequence[float]]) -> list[float]:
    """Component-wise mean of equally sized vectors."""
    return np.mean(np.asarray(vectors, dtype=np.float64), axis=0).tolist()


class SearchService:
    """Search decks by title and meaning, and recommend public decks."""

    def __init__(
        self,
        deck_repo: DeckRepository,
        saved_repo: SavedDeckRepository,
        search_log_repo: SearchLogRepository,
        owner_names: OwnerNameResolver,
        embedding_service: EmbeddingService,
        *,
        distance_threshold: float = 0.41,
        default_limit: int = 50,
        history_size: int = 5,
    ) -> None:
        self.deck_repo = deck_repo
        self.saved_repo = saved_repo
        self.search_log_repo = search_log_repo
        self.owner_names = owner_names
        self.embedding_service = embedding_service
        self.distance_threshold = distance_threshold
        self.default_limit = default_limit
        self.history_size = history_size

    async def search_decks(
        self,
        user_id: str,
        query: str,
        *,
        scope: SearchScope | str = SearchScope.PUBLIC_DECKS,
        limit: int | None = None,
    ) -> list[DeckRecord]:
        """
        Run an exact-title lookup and a nearest-neighbor query within ``scope``.

        Exact matches come first, followed by semantic matches not already
        listed. Every executed search is recorded in the user's search history.
        """
        resolved_user = require_user_id(user_id)
        if not isinstance(query, str) or not is_valid_search_query(query):
            raise ValidationError(
                ErrorCode.INVALID_SEARCH_QUERY,
                "Search query must be non-blank and contain only letters, digits and spaces.",
            )
        resolved_scope = _parse_scope(scope)
        safe_limit = self._resolve_limit(limit)

        saved_ids = None
        if resolved_scope is SearchScope.SAVED_DECKS:
            saved_ids = await self.saved_repo.list_deck_ids(resolved_user)
            if not saved_ids:
                return []

        criteria = self.deck_repo.scope_criteria(
            resolved_scope,
            user_id=resolved_user,
            saved_deck_ids=saved_ids,
        )
        normalized = clean_title(query)

        # Both must settle before the session is reused.
        vector_outcome, exact_outcome = await asyncio.gather(
            self.embedding_service.embed_query(query.strip()),
            self.deck_repo.find_by_title(normalized, criteria, limit=safe_limit),
            return_exceptions=True,
        )
        if isinstance(vector_outcome, BaseException):
            raise vector_outcome
        if isinstance(exact_outcome, BaseException):
            raise exact_outcome
        query_vector, exact = vector_outcome, exact_outcome
        nearest = await self.deck_repo.find_nearest(
            query_vector,
            criteria,
            limit=safe_limit,
            distance_threshold=self.distance_threshold,
        )
        merged = merge_search_results(exact, nearest, safe_limit)

        await self.search_log_repo.record(resolved_user, query, query_vector)
        await self.search_log_repo.session.commit()

        logger.info(
            "Deck search completed",
            extra={
                "user_id": resolved_user,
                "scope": resolved_scope.value,
                "exact_matches": len(exact),
                "vector_matches": len(nearest),
                "returned": len(merged),
            },
        )
        return await self.owner_names.to_records(merged)

    async def recommend_decks(self, user_id: str, *, limit: int | None = None) -> list[DeckRecord]:
        """Recommend public decks close to the user's recent searches."""
        resolved_user = require_user_id(user_id)
        safe_limit = self._resolve_limit(limit)

        history = await self.search_log_repo.latest_for_user(
            resolved_user,
            limit=self.history_size,
        )
        vectors = [entry.embedding for entry in history if entry.embedding]
        if not vectors:
            return []

        dimensions = len(vectors[0])
        vectors = [vector for vector in vectors if len(vector) == dimensions]
        centroid = average_vectors(vectors)

        criteria = self.deck_repo.scope_criteria(SearchScope.PUBLIC_DECKS, user_id=resolved_user)
        decks = await self.deck_repo.find_nearest(
            centroid,
            criteria,
            limit=safe_limit,
            distance_threshold=self.distance_threshold,
        )
        logger.info(
            "Recommendations computed",
            extra={"user_id": resolved_user, "history": len(vectors), "returned": len(decks)},
        )
        return await self.owner_names.to_records(decks)

    def _resolve_limit(self, limit: int | None) -> int:
        if limit is None:
            return self.default_limit
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError(
                ErrorCode.INVALID_LIMIT_VALUE,
                "Limit must be a positive integer.",
            )
        return limit


def _parse_scope(scope: SearchScope | str) -> SearchScope:
    try:
        return SearchScope(scope)
    except ValueError as exc:
        raise ValidationError(
            ErrorCode.INVALID_SEARCH_FILTER,
            f"Unknown search scope '{scope}'.",
            details={"allowed": [item.value for item in SearchScope]},
        ) from exc


__all__ = ["SearchService", "average_vectors", "merge_search_results"]
