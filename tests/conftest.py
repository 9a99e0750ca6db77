"""Shared fixtures.

Tests run against an in-memory SQLite database (aiosqlite). A single
connection is shared through StaticPool so every session sees the same
data, and foreign keys are switched on so RESTRICT behaves as on
PostgreSQL.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from category_service.config import Settings
from category_service.core.exceptions import UnauthorizedError
from category_service.infra.database import Database
from category_service.main import create_app
from category_service.schemas.user import AuthUser
from category_service.services.category_service import CategoryService
from category_service.services.tag_service import TagService
from category_service.services.user_client import UserServiceClient

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

USERS = {
    "admin-token": AuthUser(id="1", email="admin@example.com", username="admin", role="admin"),
    "editor-token": AuthUser(id="2", email="editor@example.com", username="editor", role="editor"),
    "reader-token": AuthUser(id="3", email="reader@example.com", username="reader", role="user"),
}


class FakeUserServiceClient(UserServiceClient):
    """User service stand-in that knows a fixed set of tokens."""

    def __init__(self) -> None:
        super().__init__(base_url="http://user-service.test", timeout=1.0)
        self.calls: list[str] = []

    async def get_profile(self, token: str) -> AuthUser:
        self.calls.append(token)
        if token not in USERS:
            raise UnauthorizedError("Invalid token")
        return USERS[token]


@pytest.fixture
def editor_headers() -> dict[str, str]:
    return {"Authorization": "Bearer editor-token"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": "Bearer admin-token"}


@pytest.fixture
def reader_headers() -> dict[str, str]:
    return {"Authorization": "Bearer reader-token"}


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        environment="dev",
        seed_default_categories=False,
        allow_anonymous_create=False,
        log_json=False,
    )


@pytest_asyncio.fixture
async def database() -> AsyncGenerator[Database, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    db = Database(engine)
    await db.create_schema()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def category_service(session: AsyncSession, test_settings: Settings) -> CategoryService:
    return CategoryService(session, test_settings)


@pytest.fixture
def tag_service(session: AsyncSession, test_settings: Settings) -> TagService:
    return TagService(session, test_settings)


@pytest.fixture
def user_client() -> FakeUserServiceClient:
    return FakeUserServiceClient()


@pytest_asyncio.fixture
async def client(
    database: Database,
    user_client: FakeUserServiceClient,
    test_settings: Settings,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the app, with the lifespan running."""
    app = create_app(config=test_settings, database=database, user_client=user_client)
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
