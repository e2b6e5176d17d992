import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class TaskVaultError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationRequired(TaskVaultError):
    status_code = 401

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class NotFound(TaskVaultError):
    status_code = 404


class ValidationError(TaskVaultError):
    status_code = 422


class StoreError(TaskVaultError):
    """A read or write against the database failed."""

    status_code = 503


async def _handle_taskvault_error(request: Request, exc: TaskVaultError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationRequired) else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskVaultError, _handle_taskvault_error)
