"""Integration test fixtures for database and HTTP client operations.

These fixtures require external resources (PostgreSQL database).
Uses polyfactory for type-safe test data generation.
"""

import asyncio
from collections.abc import AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.eventgate.core import db
from src.eventgate.core.config import get_settings
from src.eventgate.core.db import run_migrations_sync
from src.eventgate.main import create_app
from src.eventgate.models import Event, EventVisibility, Tenant, User
from src.eventgate.repositories import EventRepository, RegistrationRepository, UserRepository
from src.eventgate.services import CredentialIssuer, RegistrationService
from tests.factories import EventFactory, TenantFactory
from tests.helpers import create_user
from tests.utils.cleanup import cleanup_tenant_cascade, cleanup_users


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure migrations are applied."""
    await db.dispose_engine()

    settings = get_settings()
    test_engine = create_async_engine(settings.database_url, poolclass=NullPool)

    await asyncio.to_thread(run_migrations_sync, "head")

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for database operations.

    The session does NOT auto-commit; tests call ``await session.commit()``.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def test_tenant(engine: AsyncEngine, db_session: AsyncSession) -> AsyncGenerator[Tenant]:
    """Isolated tenant per test; everything it owns is removed afterwards."""
    tenant = TenantFactory.build()
    db_session.add(tenant)
    await db_session.commit()

    yield tenant

    async with engine.connect() as conn:
        await cleanup_tenant_cascade(conn, tenant.id)
        await conn.commit()


@pytest.fixture
async def private_event(db_session: AsyncSession, test_tenant: Tenant) -> Event:
    event = EventFactory.build(tenant_id=test_tenant.id)
    db_session.add(event)
    await db_session.commit()
    return event


@pytest.fixture
async def open_event(db_session: AsyncSession, test_tenant: Tenant) -> Event:
    event = EventFactory.build(tenant_id=test_tenant.id, visibility=EventVisibility.OPEN.value)
    db_session.add(event)
    await db_session.commit()
    return event


@pytest.fixture
async def make_user(
    engine: AsyncEngine, db_session: AsyncSession
) -> AsyncGenerator[Callable[..., object]]:
    """Factory fixture persisting principals and deleting them afterwards."""
    created: list[User] = []

    async def _make(**kwargs) -> User:
        user = await create_user(db_session, **kwargs)
        created.append(user)
        return user

    yield _make

    async with engine.connect() as conn:
        await cleanup_users(conn, [u.id for u in created])
        await conn.commit()


@pytest.fixture
def registration_service_factory(
    engine: AsyncEngine,
) -> Callable[[AsyncSession], RegistrationService]:
    """Build a service on a caller-owned session, one per simulated request."""

    def _build(session: AsyncSession) -> RegistrationService:
        return RegistrationService(
            EventRepository(session),
            RegistrationRepository(session),
            UserRepository(session),
            session,
            CredentialIssuer(),
        )

    return _build


@pytest.fixture
async def client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient]:
    """HTTP client against the real application and database."""
    await db.dispose_engine()

    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://api.mapease.com",
    ) as ac:
        yield ac

    await db.dispose_engine()
