"""Publish-moderation webhook client.

Private decks only become public after an external reviewer approves them.
The request is sent in the background; failures are logged and never reach
the caller that asked for publication.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

import httpx

from flashdeck.core.errors import ErrorCode, ExternalServiceError

logger = logging.getLogger("flashdeck.services.moderation")


class ModerationClient:
    """Thin wrapper over the moderation webhook."""

    def __init__(
        self,
        *,
        webhook_url: str | None,
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._transport = transport
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def enabled(self) -> bool:
        return bool(self._webhook_url)

    async def request_review(self, *, user_id: str, access_token: str, deck_id: uuid.UUID) -> None:
        """POST the publish request to the webhook, raising on any failure."""
        if not self._webhook_url:
            logger.warning(
                "Moderation webhook not configured, skipping review request",
                extra={"deck_id": str(deck_id)},
            )
            return

        payload = {"user_id": user_id, "deck_id": str(deck_id)}
        headers = {
            "Content-Type": "application/json; charset=UTF-8",
            "Authorization": access_token,
        }
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(self._webhook_url, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ExternalServiceError(
                code=ErrorCode.MODERATION_SERVICE_ERROR,
                message="Moderation webhook request failed.",
                details={"deck_id": str(deck_id), "error": str(exc)},
            ) from exc

        logger.info(
            "Moderation review requested",
            extra={"deck_id": str(deck_id), "status_code": response.status_code},
        )

    def notify(self, *, user_id: str, access_token: str, deck_id: uuid.UUID) -> asyncio.Task[None]:
        """Schedule a review request without waiting for it."""
        task = asyncio.create_task(
            self._notify_safely(user_id=user_id, access_token=access_token, deck_id=deck_id)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for in-flight notifications, used on shutdown and in tests."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def _notify_safely(self, *, user_id: str, access_token: str, deck_id: uuid.UUID) -> None:
        try:
            await self.request_review(user_id=user_id, access_token=access_token, deck_id=deck_id)
        except ExternalServiceError as exc:
            logger.error(
                "Moderation request failed",
                extra={"deck_id": str(deck_id), "details": exc.details},
            )


__all__ = ["ModerationClient"]
