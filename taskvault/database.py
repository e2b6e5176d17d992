from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from taskvault.config import get_config

config = get_config()

engine = create_async_engine(
    config.database_url,
    future=True,
    pool_pre_ping=True,
    echo=config.sql_echo,
)
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


async def create_tables() -> None:
    # registers every table on Base.metadata
    from taskvault.models import backup, settings, task  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
