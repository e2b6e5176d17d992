from fastapi import FastAPI
from mangum import Mangum

from taskvault.config import get_config
from taskvault.errors import register_error_handlers
from taskvault.logging_setup import setup_logging
from taskvault.routers.settings_router import router as settings_router
from taskvault.routers.task_router import router as task_router

setup_logging(get_config().log_level)

app = FastAPI(title="Task Lambda")
register_error_handlers(app)
app.include_router(task_router, prefix="/tasks")
app.include_router(settings_router, prefix="/settings")

handler = Mangum(app, lifespan="off")
