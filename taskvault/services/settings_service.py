from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.context import UserContext
from taskvault.repositories.settings_repo import SettingsRepository
from taskvault.services.unit_of_work import unit_of_work


class SettingsService:
    def __init__(self):
        self.repo = SettingsRepository()

    async def get_settings(self, db: AsyncSession, ctx: UserContext) -> dict[str, Any]:
        user_id = ctx.require_user()
        async with unit_of_work(db, "load settings"):
            row = await self.repo.get_for_user(db, user_id)
        return dict(row.settings_data or {}) if row is not None else {}

    async def save_settings(self, db: AsyncSession, ctx: UserContext, settings_data: dict[str, Any]) -> dict[str, Any]:
        user_id = ctx.require_user()
        async with unit_of_work(db, "save settings"):
            row = await self.repo.upsert(db, user_id, settings_data)
        return dict(row.settings_data)
