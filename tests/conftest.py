"""
Shared fixtures: in-memory SQLite database, mock services and an
ASGI client wired to them.
"""

import os

# Settings are read once per process; pin them before menucup is imported.
os.environ["ENV_MODE"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_BASE_URL"] = "http://testserver"
os.environ["LEADS_RECIPIENT"] = "sales@menucup.test"
os.environ["REORDER_PERSIST_MODE"] = "immediate"
os.environ["PUBLIC_MENU_SHOW_UNAVAILABLE"] = "true"

from contextlib import asynccontextmanager
from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from menucup import models  # noqa: F401  (registers tables)
from menucup.database import Base, get_db
from menucup.models import ProfileRole
from menucup.repository import MenuRepository
from menucup.services.auth import MockAuthProvider
from menucup.services.email import MockEmailService
from menucup.services.storage import MockStorageService
from menucup.session import SessionStore

OWNER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_ID = "22222222-2222-2222-2222-222222222222"
ADMIN_ID = "33333333-3333-3333-3333-333333333333"
PASSWORD = "secret123"

TEST_USERS = [
    ("owner@menucup.test", PASSWORD, OWNER_ID),
    ("other@menucup.test", PASSWORD, OTHER_ID),
    ("admin@menucup.test", PASSWORD, ADMIN_ID),
]


# =============================================================================
# DATABASE
# =============================================================================

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def repo(db):
    return MenuRepository(db)


@pytest.fixture
def fresh_repo(session_maker):
    """Repository on a new session, for reading back what requests wrote."""
    @asynccontextmanager
    async def factory():
        async with session_maker() as session:
            yield MenuRepository(session)
    return factory


# =============================================================================
# SEED DATA
# =============================================================================

@dataclass
class JoesBar:
    restaurant: models.Restaurant
    cocktails: models.MenuCategory
    beers: models.MenuCategory
    mojito: models.MenuItem
    old_fashioned: models.MenuItem
    lager: models.MenuItem


@pytest.fixture
async def joes_bar(repo) -> JoesBar:
    """joes-bar: Cocktails (Mojito, unavailable Old Fashioned) and Beers (Lager)."""
    restaurant = await repo.create_restaurant("Joe's Bar", "joes-bar", OWNER_ID)
    cocktails = await repo.create_category(restaurant.id, "Cocktails", "cocktails", order=1)
    beers = await repo.create_category(restaurant.id, "Beers", "beers", order=2)
    mojito = await repo.create_item(restaurant.id, cocktails.id, "Mojito", 9.5, order=1)
    old_fashioned = await repo.create_item(
        restaurant.id, cocktails.id, "Old Fashioned", 12.0, is_available=False, order=2
    )
    lager = await repo.create_item(restaurant.id, beers.id, "Lager", 5.0, order=3)
    return JoesBar(restaurant, cocktails, beers, mojito, old_fashioned, lager)


@pytest.fixture
async def admin_profile(repo):
    return await repo.set_role(ADMIN_ID, ProfileRole.ADMIN)


# =============================================================================
# SERVICES
# =============================================================================

@pytest.fixture
def auth_provider():
    return MockAuthProvider(users=TEST_USERS, secret="test-secret")


@pytest.fixture
def store(auth_provider):
    return SessionStore(auth_provider)


@pytest.fixture
def storage():
    return MockStorageService(base_url="http://testserver")


@pytest.fixture
def email_service():
    return MockEmailService(simulate_latency=False)


@pytest.fixture
def sign_in(store):
    """Open a session and return its context."""
    async def _sign_in(email: str = "owner@menucup.test"):
        result, session = await store.sign_in(email, PASSWORD)
        assert result.success, result.error_message
        return session
    return _sign_in


@pytest.fixture
def bearer(sign_in):
    """Authorization header for a signed-in user."""
    async def _bearer(email: str = "owner@menucup.test") -> dict[str, str]:
        session = await sign_in(email)
        return {"Authorization": f"Bearer {session.access_token}"}
    return _bearer


# =============================================================================
# APPLICATION
# =============================================================================

@pytest.fixture
async def client(session_maker, store, storage, email_service):
    from menucup.dependencies import get_storage, get_store
    from menucup.main import app
    from menucup.routers.landing import get_email

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_email] = lambda: email_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()
