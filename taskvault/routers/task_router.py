from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.context import UserContext, get_user_context
from taskvault.database import get_db
from taskvault.schemas.task import TaskCompletion, TaskCounts, TaskCreate, TaskOut, TaskUpdate
from taskvault.services.task_service import TaskService

router = APIRouter()
service = TaskService()

@router.get("/", response_model=list[TaskOut])
async def list_tasks(db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return await service.list_tasks(db, ctx)

@router.get("/summary", response_model=TaskCounts)
async def summarize_tasks(db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return await service.summarize(db, ctx)

@router.post("/", response_model=TaskOut, status_code=201)
async def create_task(task_in: TaskCreate, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return await service.create_task(db, ctx, task_in)

@router.get("/{task_id}", response_model=TaskOut)
async def get_task(task_id: str, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return await service.get_task(db, ctx, task_id)

@router.patch("/{task_id}", response_model=TaskOut)
async def update_task(task_id: str, patch: TaskUpdate, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return await service.update_task(db, ctx, task_id, patch)

@router.put("/{task_id}/completed", response_model=TaskOut)
async def set_completed(task_id: str, body: TaskCompletion, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return await service.toggle_complete(db, ctx, task_id, body.is_completed)

@router.delete("/{task_id}", status_code=204)
async def delete_task(task_id: str, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    await service.delete_task(db, ctx, task_id)
