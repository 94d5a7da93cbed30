"""Test fixtures for the shortcut manager."""

import os
import tempfile

# Settings are read at import time; point them at a throwaway database and log dir
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DEBUG"] = "false"
os.environ["OTEL_ENABLED"] = "false"
os.environ["TRUST_ACTOR_HEADER"] = "true"
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="linkdeck-logs-"))

import pytest
import pytest_asyncio
from typing import AsyncGenerator
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from linkdeck.db.session import get_db
from linkdeck.main import app as main_app
from linkdeck.models.common import Role
from linkdeck.repositories import (
    ActivityRepository,
    CollectionRepository,
    ShortcutRepository,
    UserRepository,
    WorkspaceSettingRepository,
)
from linkdeck.services import (
    ActivityRecorder,
    AnalyticsService,
    CollectionService,
    MetadataService,
    ShortcutService,
)
from tests.utils import actor_for, create_test_user


# Test database URL - using SQLite in-memory
TEST_SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database per test.

    Services commit, so isolation comes from a new engine rather than an
    outer rolled-back transaction.
    """
    engine = create_async_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Database session for repository and service tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def override_get_db(session_factory):
    """Override the get_db dependency with sessions on the test engine."""
    async def _override_get_db():
        async with session_factory() as session:
            yield session

    return _override_get_db


@pytest.fixture
def test_app(override_get_db) -> FastAPI:
    """FastAPI app with overridden dependencies."""
    app = main_app
    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app on the test event loop."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client


# Repositories and services

@pytest.fixture
def shortcut_repository():
    return ShortcutRepository()


@pytest.fixture
def collection_repository():
    return CollectionRepository()


@pytest.fixture
def activity_repository():
    return ActivityRepository()


@pytest.fixture
def user_repository():
    return UserRepository()


@pytest.fixture
def setting_repository():
    return WorkspaceSettingRepository()


@pytest.fixture
def recorder(activity_repository):
    return ActivityRecorder(activity_repository)


@pytest.fixture
def analytics_service(activity_repository):
    return AnalyticsService(activity_repository)


@pytest.fixture
def shortcut_service(shortcut_repository, activity_repository, recorder, analytics_service):
    return ShortcutService(
        shortcut_repository=shortcut_repository,
        activity_repository=activity_repository,
        recorder=recorder,
        analytics=analytics_service,
    )


@pytest.fixture
def collection_service(collection_repository):
    return CollectionService(collection_repository=collection_repository)


@pytest.fixture
def metadata_service(shortcut_repository, collection_repository, setting_repository):
    return MetadataService(
        shortcut_repository=shortcut_repository,
        collection_repository=collection_repository,
        setting_repository=setting_repository,
    )


# Users

@pytest_asyncio.fixture
async def owner(test_db):
    return await create_test_user(test_db, username="owner")


@pytest_asyncio.fixture
async def other_user(test_db):
    return await create_test_user(test_db, username="other")


@pytest_asyncio.fixture
async def admin(test_db):
    return await create_test_user(test_db, username="admin", role=Role.ADMIN)


@pytest.fixture
def owner_actor(owner):
    return actor_for(owner)


@pytest.fixture
def other_actor(other_user):
    return actor_for(other_user)


@pytest.fixture
def admin_actor(admin):
    return actor_for(admin)
