import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.errors import StoreError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def unit_of_work(db: AsyncSession, action: str):
    """
    One transaction per service operation: commit when the block finishes,
    roll back on any error. Database failures come out as StoreError.
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("store failure while trying to %s", action)
        raise StoreError(f"Could not {action}: the store rejected the request") from exc
    except Exception:
        await db.rollback()
        raise
