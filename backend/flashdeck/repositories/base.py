"""Common helpers for repository implementations."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from flashdeck.core.errors import StorageError

ModelT = TypeVar("ModelT")

logger = logging.getLogger("flashdeck.repositories")


class BaseRepository(Generic[ModelT]):
    """Lightweight helper storing the AsyncSession dependency."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def add(self, instance: ModelT, *, operation: str = "add") -> ModelT:
        """Add model to session handling async mocks in tests."""
        with self.storage_errors(operation, getattr(instance, "id", None)):
            add_result = cast(object, self.session.add(instance))
            if isinstance(add_result, Awaitable):
                await add_result
            await self.session.flush()
        return instance

    async def add_all(self, instances: list[ModelT], *, operation: str = "add_all") -> list[ModelT]:
        with self.storage_errors(operation):
            self.session.add_all(instances)
            await self.session.flush()
        return instances

    @contextmanager
    def storage_errors(self, operation: str, entity_id: object | None = None) -> Iterator[None]:
        """Translate driver failures into StorageError carrying the operation context."""
        try:
            yield
        except SQLAlchemyError as exc:
            logger.error(
                "Storage operation failed",
                extra={"operation": operation, "entity_id": entity_id, "error": str(exc)},
            )
            raise StorageError(
                f"Storage operation '{operation}' failed.",
                operation=operation,
                entity_id=entity_id,
            ) from exc


__all__ = ["BaseRepository"]
