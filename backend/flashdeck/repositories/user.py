"""Repository helpers for user display names."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select

from flashdeck.models.user import User
from flashdeck.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    async def names_for(self, user_ids: Sequence[str]) -> dict[str, str]:
        """Return a mapping of the given IDs that exist to their names."""
        if not user_ids:
            return {}
        stmt = select(User.id, User.name).where(User.id.in_(list(user_ids)))
        with self.storage_errors("get_owner_names"):
            result = await self.session.execute(stmt)
            return {row.id: row.name for row in result.all()}


__all__ = ["UserRepository"]
