"""Integration tests for ARQ worker tasks."""

from datetime import UTC, datetime, timedelta
from unittest.mock import patch
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tests.conftest import create_user
from zatch.core.jobs.tasks.cleanup import cleanup_expired_tokens
from zatch.core.jobs.tasks.domains import verify_domain, verify_pending_domains
from zatch.core.jobs.worker import WorkerSettings
from zatch.modules.tenants.models import Domain
from zatch.modules.users.models import RefreshToken


pytestmark = pytest.mark.integration


class MockSessionFactory:
    """Hands the test session to a task as if it opened its own."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def __aenter__(self) -> AsyncSession:
        return self.session

    async def __aexit__(self, *args) -> None:
        pass


class FixedTxtResolver:
    records: list[str] = []

    async def txt_records(self, name: str) -> list[str]:
        return self.records


@pytest.fixture
def ctx(db: AsyncSession) -> dict:
    return {"db_session_factory": lambda: MockSessionFactory(db)}


async def _add_domain(db: AsyncSession, tenant, hostname: str, token: str) -> Domain:
    domain = Domain(
        tenant_id=tenant.id,
        hostname=hostname,
        type="public",
        is_primary=False,
        verified=False,
        verify_token=token,
    )
    db.add(domain)
    await db.flush()
    return domain


async def test_cleanup_removes_expired_and_revoked_tokens(db: AsyncSession, ctx):
    user = await create_user(db, "tokens@example.com")
    expired = RefreshToken(
        user_id=user.id,
        token_hash="expired_" + uuid4().hex,
        expires_at=datetime.now(UTC) - timedelta(days=1),
        revoked=False,
    )
    revoked = RefreshToken(
        user_id=user.id,
        token_hash="revoked_" + uuid4().hex,
        expires_at=datetime.now(UTC) + timedelta(days=7),
        revoked=True,
    )
    valid = RefreshToken(
        user_id=user.id,
        token_hash="valid_" + uuid4().hex,
        expires_at=datetime.now(UTC) + timedelta(days=7),
        revoked=False,
    )
    db.add_all([expired, revoked, valid])
    await db.flush()

    result = await cleanup_expired_tokens(ctx)

    assert result["refresh_tokens_deleted"] == 2
    remaining = (await db.execute(select(RefreshToken.token_hash))).scalars().all()
    assert remaining == [valid.token_hash]


async def test_verify_pending_domains(db: AsyncSession, ctx, tenant):
    ready = await _add_domain(db, tenant, "pronto.example.com", "t" * 32)
    waiting = await _add_domain(db, tenant, "aguardando.example.com", "u" * 32)

    resolver = FixedTxtResolver()
    resolver.records = ["t" * 32]
    with patch("zatch.core.jobs.tasks.domains.DnsTxtResolver", return_value=resolver):
        result = await verify_pending_domains(ctx)

    assert result == {"verified": 1}
    assert ready.verified is True
    assert waiting.verified is False


async def test_verify_single_domain(db: AsyncSession, ctx, tenant):
    domain = await _add_domain(db, tenant, "novo.example.com", "v" * 32)

    resolver = FixedTxtResolver()
    resolver.records = ["v" * 32]
    with patch("zatch.core.jobs.tasks.domains.DnsTxtResolver", return_value=resolver):
        assert await verify_domain(ctx, "Novo.Example.com") is True

    assert domain.verified is True


def test_worker_registers_tasks():
    names = {getattr(fn, "__name__", "") for fn in WorkerSettings.functions}

    assert {"cleanup_expired_tokens", "verify_domain", "verify_pending_domains"} <= names
    assert len(WorkerSettings.cron_jobs) == 2
