import json

import pytest
from sqlalchemy.exc import SQLAlchemyError

from taskvault.context import UserContext
from taskvault.errors import AuthenticationRequired, NotFound, StoreError, ValidationError
from taskvault.models.backup import Backup
from taskvault.repositories.backup_repo import BackupRepository
from taskvault.repositories.settings_repo import SettingsRepository
from taskvault.repositories.task_repo import TaskRepository
from taskvault.schemas.task import TaskCreate, TaskOut, TaskUpdate
from taskvault.services.backup_service import BackupService
from taskvault.services.settings_service import SettingsService
from taskvault.services.task_service import TaskService

from .conftest import OTHER_USER, USER

pytestmark = pytest.mark.anyio

backups = BackupService()
tasks = TaskService()
settings = SettingsService()


async def live_tasks(session_factory, user_id=USER):
    async with session_factory() as session:
        return await TaskRepository().list_for_user(session, user_id, newest_first=False)


async def settings_rows(session_factory, user_id=USER):
    async with session_factory() as session:
        return await SettingsRepository().list(session, where={"user_id": user_id})


async def seed_tasks(db, ctx):
    t1 = await tasks.create_task(db, ctx, TaskCreate(title="T1", description="first", is_urgent=True))
    t2 = await tasks.create_task(db, ctx, TaskCreate(title="T2"))
    t3 = await tasks.create_task(db, ctx, TaskCreate(title="T3", description="done"))
    await tasks.toggle_complete(db, ctx, t3.id, True)
    return t1, t2, t3


async def test_create_backup_copies_every_task(db, ctx):
    seeded = await seed_tasks(db, ctx)
    expected = [TaskOut.model_validate(t).model_dump(mode="json") for t in seeded]

    backup = await backups.create_backup(db, ctx, "snap1")

    assert backup.id
    assert backup.user_id == USER
    assert backup.backup_name == "snap1"
    assert len(backup.tasks_data) == 3
    assert backup.tasks_data == expected
    assert backup.settings_data == {}


async def test_create_backup_trims_name(db, ctx):
    backup = await backups.create_backup(db, ctx, "  weekly  ")
    assert backup.backup_name == "weekly"


async def test_create_backup_copies_settings_document(db, ctx):
    await settings.save_settings(db, ctx, {"theme": "dark", "filters": {"urgent": True}})
    backup = await backups.create_backup(db, ctx, "with settings")
    assert backup.settings_data == {"theme": "dark", "filters": {"urgent": True}}


async def test_backup_is_not_affected_by_later_task_changes(db, ctx, session_factory):
    t1, _, _ = await seed_tasks(db, ctx)
    backup = await backups.create_backup(db, ctx, "before edit")

    await tasks.update_task(db, ctx, t1.id, TaskUpdate(title="renamed"))

    async with session_factory() as session:
        stored = await BackupRepository().get(session, backup.id)
        assert [e["title"] for e in stored.tasks_data] == ["T1", "T2", "T3"]


async def test_create_backup_requires_user(db):
    with pytest.raises(AuthenticationRequired):
        await backups.create_backup(db, UserContext(), "snap")


@pytest.mark.parametrize("name", ["", "   ", None])
async def test_create_backup_rejects_empty_name(db, ctx, session_factory, name):
    with pytest.raises(ValidationError):
        await backups.create_backup(db, ctx, name)
    async with session_factory() as session:
        assert await BackupRepository().list(session) == []


async def test_create_backup_store_failure_persists_nothing(db, ctx, session_factory, monkeypatch):
    await seed_tasks(db, ctx)
    service = BackupService()

    async def broken_create(session, obj):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(service.backups, "create", broken_create)
    with pytest.raises(StoreError):
        await service.create_backup(db, ctx, "doomed")
    async with session_factory() as session:
        assert await BackupRepository().list(session) == []


@pytest.mark.parametrize(
    "repository, method",
    [("tasks", "list_for_user"), ("settings", "get_for_user")],
)
async def test_create_backup_read_failure_persists_nothing(db, ctx, session_factory, monkeypatch, repository, method):
    await seed_tasks(db, ctx)
    await settings.save_settings(db, ctx, {"theme": "dark"})
    service = BackupService()

    async def broken_read(*args, **kwargs):
        raise SQLAlchemyError("read failed")

    monkeypatch.setattr(getattr(service, repository), method, broken_read)
    with pytest.raises(StoreError) as excinfo:
        await service.create_backup(db, ctx, "doomed")
    assert isinstance(excinfo.value.__cause__, SQLAlchemyError)
    async with session_factory() as session:
        assert await BackupRepository().list(session) == []


async def test_list_backups_most_recent_first(db, ctx, other_ctx):
    first = await backups.create_backup(db, ctx, "first")
    second = await backups.create_backup(db, ctx, "second")
    await backups.create_backup(db, other_ctx, "not mine")

    listed = await backups.list_backups(db, ctx)
    assert [b.id for b in listed] == [second.id, first.id]


async def test_restore_replaces_live_tasks(db, ctx, session_factory):
    seeded = await seed_tasks(db, ctx)
    old_ids = {t.id for t in seeded}
    backup = await backups.create_backup(db, ctx, "snap1")
    snapshot_taken_at = backup.created_at

    await tasks.delete_task(db, ctx, seeded[1].id)
    await tasks.create_task(db, ctx, TaskCreate(title="added later"))

    await backups.restore_backup(db, ctx, backup.id)

    restored = await live_tasks(session_factory)
    assert len(restored) == 3
    assert sorted((t.title, t.description, t.is_urgent, t.is_completed) for t in restored) == [
        ("T1", "first", True, False),
        ("T2", "", False, False),
        ("T3", "done", False, True),
    ]
    assert all(t.user_id == USER for t in restored)
    assert not old_ids & {t.id for t in restored}
    assert all(t.created_at > snapshot_taken_at for t in restored)
    assert all(t.updated_at > snapshot_taken_at for t in restored)


async def test_restore_empty_backup_clears_tasks(db, ctx, session_factory):
    backup = await backups.create_backup(db, ctx, "empty")
    await seed_tasks(db, ctx)

    await backups.restore_backup(db, ctx, backup.id)

    assert await live_tasks(session_factory) == []


async def test_restore_inserts_settings_when_missing(ctx, session_factory):
    async with session_factory() as session:
        backup = await BackupRepository().create(
            session,
            Backup(user_id=USER, backup_name="dark", tasks_data=[], settings_data={"theme": "dark"}),
        )
        await session.commit()
    assert await settings_rows(session_factory) == []

    async with session_factory() as session:
        await backups.restore_backup(session, ctx, backup.id)

    rows = await settings_rows(session_factory)
    assert len(rows) == 1
    assert rows[0].settings_data == {"theme": "dark"}


async def test_restore_overwrites_settings_in_place(db, ctx, session_factory):
    await settings.save_settings(db, ctx, {"theme": "dark"})
    backup = await backups.create_backup(db, ctx, "dark")
    await settings.save_settings(db, ctx, {"theme": "light", "compact": True})
    before = await settings_rows(session_factory)

    async with session_factory() as session:
        await backups.restore_backup(session, ctx, backup.id)

    after = await settings_rows(session_factory)
    assert len(after) == 1
    assert after[0].id == before[0].id
    assert after[0].settings_data == {"theme": "dark"}


async def test_restore_missing_backup_is_not_found(db, ctx, session_factory):
    await seed_tasks(db, ctx)
    with pytest.raises(NotFound):
        await backups.restore_backup(db, ctx, "does-not-exist")
    assert len(await live_tasks(session_factory)) == 3


async def test_restore_failure_rolls_back(db, ctx, session_factory, monkeypatch):
    await seed_tasks(db, ctx)
    backup = await backups.create_backup(db, ctx, "snap")
    service = BackupService()

    async def broken_bulk_create(session, models):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(service.tasks, "bulk_create", broken_bulk_create)

    async with session_factory() as session:
        with pytest.raises(StoreError) as excinfo:
            await service.restore_backup(session, ctx, backup.id)
    assert isinstance(excinfo.value.__cause__, SQLAlchemyError)
    assert [t.title for t in await live_tasks(session_factory)] == ["T1", "T2", "T3"]


async def test_backups_are_private_to_their_owner(db, ctx, other_ctx, session_factory):
    await seed_tasks(db, ctx)
    backup_id = (await backups.create_backup(db, ctx, "mine")).id
    await tasks.create_task(db, other_ctx, TaskCreate(title="bob's task"))

    with pytest.raises(NotFound):
        await backups.get_backup(db, other_ctx, backup_id)
    with pytest.raises(NotFound):
        await backups.restore_backup(db, other_ctx, backup_id)
    with pytest.raises(NotFound):
        await backups.delete_backup(db, other_ctx, backup_id)

    assert [t.title for t in await live_tasks(session_factory, OTHER_USER)] == ["bob's task"]
    assert len(await live_tasks(session_factory)) == 3


async def test_delete_backup_twice(db, ctx, session_factory):
    keep = await backups.create_backup(db, ctx, "keep")
    keep_id = keep.id
    drop = await backups.create_backup(db, ctx, "drop")
    drop_id = drop.id

    await backups.delete_backup(db, ctx, drop_id)
    with pytest.raises(NotFound):
        await backups.delete_backup(db, ctx, drop_id)

    async with session_factory() as session:
        remaining = await BackupRepository().list_for_user(session, USER)
    assert [b.id for b in remaining] == [keep_id]


async def test_delete_backup_leaves_tasks_alone(db, ctx, session_factory):
    await seed_tasks(db, ctx)
    backup = await backups.create_backup(db, ctx, "snap")
    await backups.delete_backup(db, ctx, backup.id)
    assert len(await live_tasks(session_factory)) == 3


async def test_export_backup(db, ctx):
    await seed_tasks(db, ctx)
    await settings.save_settings(db, ctx, {"theme": "dark"})
    backup = await backups.create_backup(db, ctx, "snap1")

    export = await backups.export_backup(db, ctx, backup.id)

    assert export.filename == "snap1.json"
    document = json.loads(export.content)
    assert list(document) == ["id", "user_id", "backup_name", "tasks_data", "settings_data", "created_at"]
    assert document["id"] == backup.id
    assert document["backup_name"] == "snap1"
    assert len(document["tasks_data"]) == 3
    assert document["settings_data"] == {"theme": "dark"}
    assert export.content.splitlines()[1].startswith('  "id"')


async def test_export_missing_backup(db, ctx):
    with pytest.raises(NotFound):
        await backups.export_backup(db, ctx, "nope")
