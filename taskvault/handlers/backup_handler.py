from fastapi import FastAPI
from mangum import Mangum

from taskvault.config import get_config
from taskvault.errors import register_error_handlers
from taskvault.logging_setup import setup_logging
from taskvault.routers.backup_router import router as backup_router

setup_logging(get_config().log_level)

app = FastAPI(title="Backup Lambda")
register_error_handlers(app)
app.include_router(backup_router, prefix="/backups")

handler = Mangum(app, lifespan="off")
