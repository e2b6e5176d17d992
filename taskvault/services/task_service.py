import logging

from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.context import UserContext
from taskvault.errors import NotFound
from taskvault.models.task import Task
from taskvault.repositories.task_repo import TaskRepository
from taskvault.schemas.task import TaskCounts, TaskCreate, TaskUpdate
from taskvault.services.ordering import derive_counts, sort_tasks
from taskvault.services.unit_of_work import unit_of_work
from taskvault.services.validation import require_text

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self):
        self.repo = TaskRepository()

    async def list_tasks(self, db: AsyncSession, ctx: UserContext) -> list[Task]:
        user_id = ctx.require_user()
        async with unit_of_work(db, "load tasks"):
            tasks = await self.repo.list_for_user(db, user_id)
        return sort_tasks(tasks)

    async def summarize(self, db: AsyncSession, ctx: UserContext) -> TaskCounts:
        return derive_counts(await self.list_tasks(db, ctx))

    async def get_task(self, db: AsyncSession, ctx: UserContext, task_id: str) -> Task:
        user_id = ctx.require_user()
        async with unit_of_work(db, "load task"):
            task = await self.repo.get_for_user(db, user_id, task_id)
        if task is None:
            raise NotFound("Task not found")
        return task

    async def create_task(self, db: AsyncSession, ctx: UserContext, task_in: TaskCreate) -> Task:
        title = require_text(task_in.title, "title")
        user_id = ctx.require_user()
        task = Task(
            user_id=user_id,
            title=title,
            description=task_in.description or "",
            is_urgent=task_in.is_urgent,
            is_completed=False,
        )
        async with unit_of_work(db, "create task"):
            await self.repo.create(db, task)
        logger.debug("user %s created task %s", user_id, task.id)
        return task

    async def update_task(self, db: AsyncSession, ctx: UserContext, task_id: str, patch: TaskUpdate) -> Task:
        values = patch.model_dump(exclude_unset=True)
        if "title" in values:
            values["title"] = require_text(values["title"], "title")
        # explicit nulls for the other fields mean "leave unchanged"
        values = {k: v for k, v in values.items() if v is not None}
        user_id = ctx.require_user()
        async with unit_of_work(db, "update task"):
            task = await self.repo.get_for_user(db, user_id, task_id)
            if task is None:
                raise NotFound("Task not found")
            if values:
                await self.repo.update_fields(db, task, values)
        return task

    async def toggle_complete(self, db: AsyncSession, ctx: UserContext, task_id: str, is_completed: bool) -> Task:
        return await self.update_task(db, ctx, task_id, TaskUpdate(is_completed=is_completed))

    async def delete_task(self, db: AsyncSession, ctx: UserContext, task_id: str) -> None:
        user_id = ctx.require_user()
        async with unit_of_work(db, "delete task"):
            task = await self.repo.get_for_user(db, user_id, task_id)
            if task is None:
                raise NotFound("Task not found")
            await self.repo.delete(db, task)
