import pytest
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from taskvault.main import app
from taskvault.database import Base, get_db
from taskvault.context import UserContext

TEST_DATABASE_URL = "sqlite+aiosqlite://"

USER = "user-alice"
OTHER_USER = "user-bob"


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"

@pytest.fixture
async def engine():
    # one shared connection so every session sees the same in-memory database
    engine_test = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine_test.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine_test
    await engine_test.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session

@pytest.fixture
def ctx():
    return UserContext(user_id=USER)

@pytest.fixture
def other_ctx():
    return UserContext(user_id=OTHER_USER)

@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session
    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"X-User-Id": USER}) as ac:
        yield ac
    app.dependency_overrides.clear()
