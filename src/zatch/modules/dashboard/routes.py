"""Dashboard routes."""

from fastapi import APIRouter
from pydantic import BaseModel

from zatch.api.dependencies import DBSession
from zatch.core.database.tenant import TenantSession
from zatch.core.permissions import require_permission
from zatch.modules.messages.services import MessageService
from zatch.modules.properties.repos import PropertyRepository
from zatch.modules.tenants.context import MemberContext


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class DashboardStats(BaseModel):
    total_properties: int
    active_properties: int
    featured_properties: int
    by_status: dict[str, int]
    unread_messages: int
    total_views: int
    total_shares: int


@router.get("/stats", response_model=DashboardStats, summary="Agency statistics")
@require_permission("dashboard", "view")
async def get_stats(context: MemberContext, db: DBSession) -> DashboardStats:
    stats = await PropertyRepository(TenantSession(db, context.tenant.id)).stats()
    unread = await MessageService(db).unread_count(context.tenant.id)
    return DashboardStats(
        total_properties=stats["total"],
        active_properties=stats["active"],
        featured_properties=stats["featured"],
        by_status=stats["by_status"],
        unread_messages=unread,
        total_views=stats["views"],
        total_shares=stats["shares"],
    )
