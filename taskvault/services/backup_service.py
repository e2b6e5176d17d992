"""
Backup engine: snapshot, list, restore, delete and export a user's backups.

A backup is a value copy of the user's task rows and settings document.
Restoring one replaces the live task set and settings document; the delete,
re-insert and settings upsert run in a single transaction, so a failure part
way through leaves the previous state untouched.
"""

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.context import UserContext
from taskvault.errors import NotFound
from taskvault.models.backup import Backup
from taskvault.models.task import Task
from taskvault.repositories.backup_repo import BackupRepository
from taskvault.repositories.settings_repo import SettingsRepository
from taskvault.repositories.task_repo import TaskRepository
from taskvault.schemas.task import TaskOut
from taskvault.services.unit_of_work import unit_of_work
from taskvault.services.validation import require_text

logger = logging.getLogger(__name__)

# task fields carried back into live rows on restore; ids and timestamps are new
RESTORED_FIELDS = ("title", "description", "is_urgent", "is_completed")


@dataclass(frozen=True)
class BackupExport:
    filename: str
    content: str


def snapshot_task(task: Task) -> dict[str, Any]:
    """JSON-safe copy of one task row."""
    return TaskOut.model_validate(task).model_dump(mode="json")


def task_from_snapshot(user_id: str, entry: dict[str, Any]) -> Task:
    return Task(
        user_id=user_id,
        title=entry.get("title") or "",
        description=entry.get("description") or "",
        is_urgent=bool(entry.get("is_urgent", False)),
        is_completed=bool(entry.get("is_completed", False)),
    )


def backup_document(backup: Backup) -> dict[str, Any]:
    return {
        "id": backup.id,
        "user_id": backup.user_id,
        "backup_name": backup.backup_name,
        "tasks_data": backup.tasks_data or [],
        "settings_data": backup.settings_data or {},
        "created_at": backup.created_at.isoformat() if backup.created_at else None,
    }


class BackupService:
    def __init__(self):
        self.backups = BackupRepository()
        self.tasks = TaskRepository()
        self.settings = SettingsRepository()

    async def create_backup(self, db: AsyncSession, ctx: UserContext, backup_name: str) -> Backup:
        """
        Snapshot every task the user owns plus their settings document
        (``{}`` when they have none). The backup insert is the only write.
        """
        name = require_text(backup_name, "backup_name")
        user_id = ctx.require_user()
        async with unit_of_work(db, "create backup"):
            tasks = await self.tasks.list_for_user(db, user_id, newest_first=False)
            settings = await self.settings.get_for_user(db, user_id)
            backup = Backup(
                user_id=user_id,
                backup_name=name,
                tasks_data=[snapshot_task(t) for t in tasks],
                settings_data=copy.deepcopy(settings.settings_data) if settings is not None else {},
            )
            await self.backups.create(db, backup)
        logger.info("user %s created backup %s with %d tasks", user_id, backup.id, len(backup.tasks_data))
        return backup

    async def list_backups(self, db: AsyncSession, ctx: UserContext) -> list[Backup]:
        """Most recent first."""
        user_id = ctx.require_user()
        async with unit_of_work(db, "list backups"):
            return await self.backups.list_for_user(db, user_id)

    async def get_backup(self, db: AsyncSession, ctx: UserContext, backup_id: str) -> Backup:
        user_id = ctx.require_user()
        async with unit_of_work(db, "load backup"):
            backup = await self.backups.get_for_user(db, user_id, backup_id)
        if backup is None:
            raise NotFound("Backup not found")
        return backup

    async def restore_backup(self, db: AsyncSession, ctx: UserContext, backup_id: str) -> None:
        user_id = ctx.require_user()
        async with unit_of_work(db, "restore backup"):
            backup = await self.backups.get_for_user(db, user_id, backup_id)
            if backup is None:
                raise NotFound("Backup not found")

            removed = await self.tasks.delete_for_user(db, user_id)
            restored = await self.tasks.bulk_create(
                db, [task_from_snapshot(user_id, entry) for entry in backup.tasks_data or []]
            )
            await self.settings.upsert(db, user_id, copy.deepcopy(backup.settings_data or {}))
        logger.info(
            "user %s restored backup %s: replaced %d tasks with %d",
            user_id, backup_id, removed, restored,
        )

    async def delete_backup(self, db: AsyncSession, ctx: UserContext, backup_id: str) -> None:
        user_id = ctx.require_user()
        async with unit_of_work(db, "delete backup"):
            backup = await self.backups.get_for_user(db, user_id, backup_id)
            if backup is None:
                raise NotFound("Backup not found")
            await self.backups.delete(db, backup)
        logger.info("user %s deleted backup %s", user_id, backup_id)

    async def export_backup(self, db: AsyncSession, ctx: UserContext, backup_id: str) -> BackupExport:
        backup = await self.get_backup(db, ctx, backup_id)
        content = json.dumps(backup_document(backup), indent=2, ensure_ascii=False)
        return BackupExport(filename=f"{backup.backup_name}.json", content=content)
