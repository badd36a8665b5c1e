"""Shared pytest fixtures."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.infrastructure.database.models import Base
from tests.mocks.fake_task_hub import (
    FakeDurableClient,
    FakeHistoryStorage,
    FakeIdentityValidator,
    FakeTaskHub,
    FakeTemplateRegistry,
)
from tests.mocks.history_factory import parent_child_records, parent_history


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def hub() -> FakeTaskHub:
    """Task hub seeded with a parent instance."""
    hub = FakeTaskHub()
    hub.add_instance(
        "parent-1",
        name="Parent",
        history=parent_history(),
        child_records=parent_child_records(),
        input={"city": "Seattle"},
    )
    return hub


@pytest.fixture
def durable_client(hub) -> FakeDurableClient:
    return FakeDurableClient(hub)


@pytest.fixture
def history_storage(hub) -> FakeHistoryStorage:
    return FakeHistoryStorage(hub)


@pytest.fixture
def identity_validator() -> FakeIdentityValidator:
    return FakeIdentityValidator()


@pytest.fixture
def template_registry() -> FakeTemplateRegistry:
    return FakeTemplateRegistry({
        ("Parent", "Summary"): "<h1>{{ name }}</h1><p>{{ runtime_status }}</p>",
    })


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def test_session_factory(test_engine):
    """Create test session factory."""
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    yield session_factory
