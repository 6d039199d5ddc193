"""Service test fixtures — async DB, repositories, FastAPI test client, socket handlers.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - app.state.db_manager points at the test engine (readiness probe, socket events)
    - Socket handlers run against a real AsyncServer whose emit is an AsyncMock

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - db_manager built via __new__: reuses the test engine instead of opening a pool
"""

from unittest.mock import AsyncMock

import pytest
import socketio
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from userhub.api.events.user_events import UserEventHandlers
from userhub.db.base import Base
from userhub.infrastructure.database import get_db, DatabaseSessionManager
from userhub.main import app
from userhub.models.user import User  # noqa: F401
from userhub.repositories.user import UserRepository
from userhub.services.user_service import UserService


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def user_repo(test_db):
    return UserRepository(test_db)


@pytest.fixture
def user_service(user_repo):
    return UserService(user_repo)


@pytest.fixture
def fake_db_manager(test_engine, test_session_factory):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    return manager


@pytest.fixture
async def client(test_session_factory, fake_db_manager):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    original_manager = getattr(app.state, "db_manager", None)
    app.state.db_manager = fake_db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.db_manager = original_manager


@pytest.fixture
def sio():
    server = socketio.AsyncServer(async_mode="asgi")
    server.emit = AsyncMock()
    return server


@pytest.fixture
def user_events(sio, test_session_factory):
    handlers = UserEventHandlers(sio, test_session_factory)
    handlers.register()
    return handlers


@pytest.fixture
async def seed_user(user_service):
    """Insert one user through the service (password gets hashed)."""
    return await user_service.create_user("alice", "a@x.com", "p")
