"""
Embedding service for OpenAI integration.

Turns deck text and search queries into fixed-length vectors with:
- Automatic retries with exponential backoff
- Dimension checks on every response
- Structured logging of model and vector size
"""

from __future__ import annotations

import logging
from enum import Enum

from openai import (
    APIConnectionError,
    APIError,
    AsyncOpenAI,
    OpenAIError,
    RateLimitError,
)
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from flashdeck.core.errors import ErrorCode, ExternalServiceError

logger = logging.getLogger("flashdeck.services.embedding")


class EmbeddingPurpose(str, Enum):
    """Whether text is being indexed or used to query the index."""

    DOCUMENT = "document"
    QUERY = "query"


class EmbeddingService:
    """Adapter over the OpenAI embeddings endpoint."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        dimensions: int = 768,
        default_timeout: float = 20.0,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """
        Initialize embedding service.

        Args:
            api_key: OpenAI API key
            model: Embedding model name
            dimensions: Length of every returned vector
            default_timeout: Request timeout in seconds
            client: Preconfigured client, mainly for tests
        """
        self.model = model
        self.dimensions = dimensions
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=default_timeout)

        logger.info(
            "Embedding service initialized",
            extra={"model": model, "dimensions": dimensions},
        )

    async def embed_document(self, text: str) -> list[float]:
        """Embed deck content (title plus description) for storage."""
        return await self._embed(text, EmbeddingPurpose.DOCUMENT)

    async def embed_query(self, text: str) -> list[float]:
        """Embed a free-text search query."""
        return await self._embed(text, EmbeddingPurpose.QUERY)

    async def _embed(self, text: str, purpose: EmbeddingPurpose) -> list[float]:
        try:
            vector = await self._request_embedding(text)
        except OpenAIError as exc:
            logger.error(
                "Embedding request failed",
                extra={"model": self.model, "purpose": purpose.value, "error": str(exc)},
            )
            raise ExternalServiceError(
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                message="Failed to generate text embedding.",
                details={"purpose": purpose.value},
            ) from exc

        if len(vector) != self.dimensions:
            logger.error(
                "Embedding has unexpected size",
                extra={"model": self.model, "expected": self.dimensions, "actual": len(vector)},
            )
            raise ExternalServiceError(
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                message="Embedding service returned a vector of unexpected size.",
                details={"expected": self.dimensions, "actual": len(vector)},
            )

        logger.info(
            "Embedding generated",
            extra={"model": self.model, "purpose": purpose.value, "dimensions": len(vector)},
        )
        return vector

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((RateLimitError, APIConnectionError, APIError)),
        reraise=True,
    )
    async def _request_embedding(self, text: str) -> list[float]:
        try:
            response = await self.client.embeddings.create(
                model=self.model,
                input=text,
                dimensions=self.dimensions,
            )
        except RateLimitError as e:
            logger.warning("Embedding rate limit exceeded, retrying", extra={"error": str(e)})
            raise
        except APIConnectionError as e:
            logger.warning("Embedding connection error, retrying", extra={"error": str(e)})
            raise

        if not response.data:
            raise ExternalServiceError(
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                message="Embedding service returned no data.",
            )
        return [float(value) for value in response.data[0].embedding]


__all__ = ["EmbeddingPurpose", "EmbeddingService"]
