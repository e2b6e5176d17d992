from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.models.backup import Backup
from taskvault.repositories.base import BaseRepository


class BackupRepository(BaseRepository[Backup]):
    def __init__(self):
        super().__init__(Backup)

    async def list_for_user(self, db: AsyncSession, user_id: str) -> list[Backup]:
        return await self.list(
            db,
            where={"user_id": user_id},
            order_by=(Backup.created_at.desc(), Backup.id.desc()),
        )

    async def get_for_user(self, db: AsyncSession, user_id: str, backup_id: str) -> Backup | None:
        return await self.find_one(db, id=backup_id, user_id=user_id)
