"""Contact message routes."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from zatch.core.permissions import require_permission
from zatch.modules.messages.schemas import MessageCreate, MessageResponse, UnreadCountResponse
from zatch.modules.messages.services import MessageSvc
from zatch.modules.tenants.context import MemberContext, PublicContext


router = APIRouter(tags=["messages"])


@router.post(
    "/public/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message to the agency",
)
async def send_message(
    data: MessageCreate,
    context: PublicContext,
    service: MessageSvc,
) -> MessageResponse:
    message = await service.create(context.tenant.id, data)
    return MessageResponse.model_validate(message)


@router.get("/messages", response_model=list[MessageResponse], summary="List messages")
@require_permission("messages", "view")
async def list_messages(
    context: MemberContext,
    service: MessageSvc,
    unread_only: bool = Query(False),
) -> list[MessageResponse]:
    messages = await service.list_messages(context.tenant.id, unread_only)
    return [MessageResponse.model_validate(message) for message in messages]


@router.get(
    "/messages/unread-count",
    response_model=UnreadCountResponse,
    summary="Count unread messages",
)
@require_permission("messages", "view")
async def unread_count(context: MemberContext, service: MessageSvc) -> UnreadCountResponse:
    return UnreadCountResponse(unread=await service.unread_count(context.tenant.id))


@router.post(
    "/messages/{message_id}/read",
    response_model=MessageResponse,
    summary="Mark a message as read",
)
@require_permission("messages", "edit")
async def mark_read(
    message_id: UUID,
    context: MemberContext,
    service: MessageSvc,
    read: bool = Query(True),
) -> MessageResponse:
    message = await service.mark_read(context.tenant.id, message_id, read)
    return MessageResponse.model_validate(message)


@router.delete(
    "/messages/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a message",
)
@require_permission("messages", "delete")
async def delete_message(
    message_id: UUID,
    context: MemberContext,
    service: MessageSvc,
) -> None:
    await service.delete(context.tenant.id, message_id)
