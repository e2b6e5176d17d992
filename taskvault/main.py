from contextlib import asynccontextmanager

from fastapi import FastAPI

from taskvault.config import get_config
from taskvault.database import create_tables
from taskvault.errors import register_error_handlers
from taskvault.logging_setup import setup_logging
from taskvault.routers import backup_router, settings_router, task_router

config = get_config()
setup_logging(config.log_level)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if config.create_tables:
        await create_tables()
    yield


app = FastAPI(title="Task Vault", lifespan=lifespan)
register_error_handlers(app)

app.include_router(task_router.router, prefix="/tasks", tags=["Tasks"])
app.include_router(settings_router.router, prefix="/settings", tags=["Settings"])
app.include_router(backup_router.router, prefix="/backups", tags=["Backups"])

# Root health
@app.get("/")
async def read_root():
    return {"status": "ok"}
