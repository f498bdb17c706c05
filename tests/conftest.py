"""Pytest configuration and shared fixtures.

API tests run against an in-memory SQLite database. Every test gets a fresh
schema and a session whose transaction is rolled back at the end.

Hostnames used throughout:

* ``painel.example.com``  verified admin domain of the test agency
* ``www.example.com``     verified public domain of the test agency
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from zatch.core.auth import create_access_token, hash_password
from zatch.core.database import Base, get_db
from zatch.core.permissions.defaults import seed_default_permissions
from zatch.main import create_app
from zatch.modules import load_models
from zatch.modules.tenants.models import Domain, Tenant, TenantUser
from zatch.modules.users.models import User


TEST_DATABASE_URL = "sqlite+aiosqlite://"

ADMIN_HOST = "painel.example.com"
PUBLIC_HOST = "www.example.com"
TEST_PASSWORD = "SecurePass123!"

load_models()


@pytest.fixture
async def engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db(engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests.

    Each test runs in its own transaction that is rolled back
    after the test completes.
    """
    session_factory = async_sessionmaker(
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.begin()

        async with session_factory(bind=conn) as session:
            yield session

        await conn.rollback()


@pytest.fixture
async def app(db: AsyncSession):
    """Create test application instance."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db

    yield application

    application.dependency_overrides.clear()


def make_client(app, host: str, token: str | None = None) -> AsyncClient:
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url=f"http://{host}",
        headers=headers,
    )


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Anonymous client on the admin hostname."""
    async with make_client(app, ADMIN_HOST) as client:
        yield client


@pytest.fixture
async def public_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Anonymous client on the public storefront hostname."""
    async with make_client(app, PUBLIC_HOST) as client:
        yield client


# ============================================================
# Tenant, Domain and User Fixtures
# ============================================================


@pytest.fixture
async def permissions(db: AsyncSession) -> None:
    await seed_default_permissions(db)


@pytest.fixture
async def tenant(db: AsyncSession) -> Tenant:
    tenant = Tenant(name="Imobiliária Horizonte", slug="horizonte", status="active", settings={})
    db.add(tenant)
    await db.flush()
    return tenant


@pytest.fixture
async def admin_domain(db: AsyncSession, tenant: Tenant) -> Domain:
    domain = Domain(
        tenant_id=tenant.id,
        hostname=ADMIN_HOST,
        type="admin",
        is_primary=True,
        verified=True,
        verify_token="a" * 32,
    )
    db.add(domain)
    await db.flush()
    return domain


@pytest.fixture
async def public_domain(db: AsyncSession, tenant: Tenant) -> Domain:
    domain = Domain(
        tenant_id=tenant.id,
        hostname=PUBLIC_HOST,
        type="public",
        is_primary=True,
        verified=True,
        verify_token="b" * 32,
    )
    db.add(domain)
    await db.flush()
    return domain


async def create_user(db: AsyncSession, email: str, full_name: str = "Test User") -> User:
    user = User(email=email, password_hash=hash_password(TEST_PASSWORD), full_name=full_name)
    db.add(user)
    await db.flush()
    return user


async def add_membership(db: AsyncSession, tenant: Tenant, user: User, role: str) -> TenantUser:
    membership = TenantUser(tenant_id=tenant.id, user_id=user.id, role=role)
    db.add(membership)
    await db.flush()
    return membership


@pytest.fixture
async def owner(db: AsyncSession, tenant: Tenant) -> User:
    user = await create_user(db, "owner@example.com", "Olivia Owner")
    await add_membership(db, tenant, user, "owner")
    return user


@pytest.fixture
async def agent(db: AsyncSession, tenant: Tenant) -> User:
    user = await create_user(db, "agent@example.com", "Arthur Agent")
    await add_membership(db, tenant, user, "agent")
    return user


@pytest.fixture
async def outsider(db: AsyncSession) -> User:
    """A signed-up user with no membership in the test agency."""
    return await create_user(db, "outsider@example.com", "Oscar Outsider")


@pytest.fixture
async def owner_client(
    app, owner: User, admin_domain: Domain, permissions: None
) -> AsyncGenerator[AsyncClient, None]:
    """Owner signed in on the admin hostname."""
    async with make_client(app, ADMIN_HOST, create_access_token(owner.id)) as client:
        yield client


@pytest.fixture
async def agent_client(
    app, agent: User, admin_domain: Domain, permissions: None
) -> AsyncGenerator[AsyncClient, None]:
    """Agent signed in on the admin hostname."""
    async with make_client(app, ADMIN_HOST, create_access_token(agent.id)) as client:
        yield client
