"""Unit tests for the require_permission decorator."""

from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from zatch.core.errors import ForbiddenError, UnauthorizedError
from zatch.core.permissions import require_permission


def make_context(role: str | None, allowed: bool = True) -> SimpleNamespace:
    permissions = SimpleNamespace(can_access=AsyncMock(return_value=allowed))
    return SimpleNamespace(
        role=role,
        membership=SimpleNamespace(role=role) if role else None,
        permissions=permissions,
        tenant=SimpleNamespace(id=uuid4()),
    )


@require_permission("properties", "delete")
async def delete_listing(property_id: str, context) -> str:
    return f"deleted {property_id}"


async def test_allowed_call_runs_the_handler():
    context = make_context("agent", allowed=True)

    result = await delete_listing(property_id="p1", context=context)

    assert result == "deleted p1"
    context.permissions.can_access.assert_awaited_once_with("agent", "properties", "delete")


async def test_denied_call_raises_forbidden():
    context = make_context("agent", allowed=False)

    with pytest.raises(ForbiddenError) as exc_info:
        await delete_listing(property_id="p1", context=context)

    assert exc_info.value.error_code == "permission_denied"
    assert exc_info.value.details == {"page_key": "properties", "action": "delete"}


async def test_anonymous_context_is_unauthorized():
    with pytest.raises(UnauthorizedError):
        await delete_listing(property_id="p1", context=make_context(None))


async def test_missing_context_is_unauthorized():
    with pytest.raises(UnauthorizedError):
        await delete_listing(property_id="p1")


def test_wrapper_keeps_the_handler_signature():
    assert delete_listing.__name__ == "delete_listing"
    assert "context" in delete_listing.__wrapped__.__code__.co_varnames
