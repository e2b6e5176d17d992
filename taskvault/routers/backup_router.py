from urllib.parse import quote

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.context import UserContext, get_user_context
from taskvault.database import get_db
from taskvault.schemas.backup import BackupCreate, BackupOut
from taskvault.services.backup_service import BackupService

router = APIRouter()
service = BackupService()


def content_disposition(filename: str) -> str:
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "'")
    # header values may not carry control characters
    fallback = "".join("_" if ord(ch) < 0x20 or ch == "\x7f" else ch for ch in fallback)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"

@router.post("/", response_model=BackupOut, status_code=201)
async def create_backup(backup_in: BackupCreate, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return await service.create_backup(db, ctx, backup_in.backup_name)

@router.get("/", response_model=list[BackupOut])
async def list_backups(db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return await service.list_backups(db, ctx)

@router.get("/{backup_id}", response_model=BackupOut)
async def get_backup(backup_id: str, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    return await service.get_backup(db, ctx, backup_id)

@router.post("/{backup_id}/restore", status_code=204)
async def restore_backup(backup_id: str, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    await service.restore_backup(db, ctx, backup_id)

@router.delete("/{backup_id}", status_code=204)
async def delete_backup(backup_id: str, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    await service.delete_backup(db, ctx, backup_id)

@router.get("/{backup_id}/export")
async def export_backup(backup_id: str, db: AsyncSession = Depends(get_db), ctx: UserContext = Depends(get_user_context)):
    export = await service.export_backup(db, ctx, backup_id)
    return Response(
        content=export.content,
        media_type="application/json",
        headers={"Content-Disposition": content_disposition(export.filename)},
    )
