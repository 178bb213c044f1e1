"""
Pytest fixtures for testing.

Provides:
- Async SQLite database (in-memory, shared connection)
- App + client wired to a fresh policy engine
- Token helpers for callers with a given role
- In-memory PolicyStore fakes, including failing variants
"""

from typing import AsyncGenerator, Iterable, Sequence

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from rbac_admin.api.dependencies.database import get_db
from rbac_admin.core.rbac import (
    Enforcer,
    PersistenceError,
    PolicyStore,
    PolicyTuple,
    SourceQueryError,
)
from rbac_admin.core.security import create_access_token
from rbac_admin.main import create_app, wire_policy_engine
from rbac_admin.models import Base
from rbac_admin.utils.seed import seed_defaults


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Database session for arranging and inspecting test data."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def seeded(db: AsyncSession) -> AsyncSession:
    """Database with the default roles, permissions and associations."""
    await seed_defaults(db)
    return db


@pytest_asyncio.fixture
async def app(seeded, session_factory):
    """
    Application wired to the test database, with the engine synchronized.

    The lifespan is skipped; wiring and the first synchronization happen here.
    """
    app = create_app(use_lifespan=False)
    policy_admin = wire_policy_engine(app, session_factory)
    await policy_admin.synchronize()

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============ Auth Helpers ============


def auth_headers_for(role: str | None, subject: str = "tester") -> dict[str, str]:
    """Bearer header for a caller with the given role (None = no role claim)."""
    token = create_access_token(subject=subject, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return auth_headers_for("admin", subject="root")


@pytest.fixture
def user_headers() -> dict[str, str]:
    return auth_headers_for("user", subject="alice")


@pytest.fixture
def guest_headers() -> dict[str, str]:
    return auth_headers_for("guest", subject="visitor")


# ============ Policy Store Fakes ============


class InMemoryPolicyStore(PolicyStore):
    """PolicyStore over plain lists."""

    def __init__(self, tuples: Iterable[PolicyTuple] = ()):
        self.source: list[PolicyTuple] = list(tuples)
        self.persisted: list[PolicyTuple] | None = None
        self.load_calls = 0
        self.persist_calls = 0

    async def load_active_role_permission_tuples(self) -> Sequence[PolicyTuple]:
        self.load_calls += 1
        return list(self.source)

    async def persist_policy_snapshot(self, tuples: Iterable[PolicyTuple]) -> None:
        self.persist_calls += 1
        self.persisted = sorted(set(tuples))


class FailingSourceStore(InMemoryPolicyStore):
    """Association data cannot be read."""

    async def load_active_role_permission_tuples(self) -> Sequence[PolicyTuple]:
        self.load_calls += 1
        raise SourceQueryError("database unavailable")


class FailingPersistStore(InMemoryPolicyStore):
    """Mirror writes always fail."""

    async def persist_policy_snapshot(self, tuples: Iterable[PolicyTuple]) -> None:
        self.persist_calls += 1
        raise PersistenceError("disk full")


@pytest.fixture
def memory_store() -> InMemoryPolicyStore:
    return InMemoryPolicyStore()


@pytest.fixture
def enforcer() -> Enforcer:
    return Enforcer()
