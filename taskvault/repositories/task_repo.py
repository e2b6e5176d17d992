from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.models.task import Task
from taskvault.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    def __init__(self):
        super().__init__(Task)

    async def list_for_user(self, db: AsyncSession, user_id: str, *, newest_first: bool = True) -> list[Task]:
        if newest_first:
            order = (Task.created_at.desc(), Task.id.desc())
        else:
            order = (Task.created_at.asc(), Task.id.asc())
        return await self.list(db, where={"user_id": user_id}, order_by=order)

    async def get_for_user(self, db: AsyncSession, user_id: str, task_id: str) -> Task | None:
        return await self.find_one(db, id=task_id, user_id=user_id)

    async def delete_for_user(self, db: AsyncSession, user_id: str) -> int:
        return await self.delete_where(db, user_id=user_id)
