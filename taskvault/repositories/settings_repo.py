from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.models.settings import AppSettings
from taskvault.repositories.base import BaseRepository


class SettingsRepository(BaseRepository[AppSettings]):
    def __init__(self):
        super().__init__(AppSettings)

    async def get_for_user(self, db: AsyncSession, user_id: str) -> AppSettings | None:
        return await self.find_one(db, user_id=user_id)

    async def upsert(self, db: AsyncSession, user_id: str, settings_data: dict[str, Any]) -> AppSettings:
        """Update the user's document in place, or insert it on first write."""
        current = await self.get_for_user(db, user_id)
        if current is not None:
            return await self.update_fields(db, current, {"settings_data": dict(settings_data)})
        return await self.create(db, AppSettings(user_id=user_id, settings_data=dict(settings_data)))
