"""Contact message service."""

from typing import Annotated
from uuid import UUID

import structlog
from fastapi import Depends
from sqlalchemy import func, select

from zatch.api.dependencies import DBSession
from zatch.core.database.tenant import TenantSession
from zatch.core.errors import NotFoundError
from zatch.modules.messages.models import ContactMessage
from zatch.modules.messages.schemas import MessageCreate
from zatch.modules.properties.models import Property


logger = structlog.get_logger()


class MessageService:
    """Storing visitor enquiries and working through them in the back office."""

    def __init__(self, db: DBSession) -> None:
        self.db = db

    async def create(self, tenant_id: UUID, data: MessageCreate) -> ContactMessage:
        """Store a message. A property id from another agency is dropped."""
        scoped = TenantSession(self.db, tenant_id)
        property_id = data.property_id
        if property_id is not None and await scoped.get(Property, property_id) is None:
            property_id = None

        message = ContactMessage(
            tenant_id=tenant_id,
            property_id=property_id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            message=data.message,
        )
        scoped.add(message)
        await scoped.flush()
        await scoped.refresh(message)
        logger.info("contact_message_received", tenant_id=str(tenant_id), message_id=str(message.id))
        return message

    async def list_messages(self, tenant_id: UUID, unread_only: bool = False) -> list[ContactMessage]:
        stmt = select(ContactMessage).order_by(ContactMessage.created_at.desc())
        if unread_only:
            stmt = stmt.where(ContactMessage.read == False)  # noqa: E712
        return await TenantSession(self.db, tenant_id).scalars(stmt)

    async def unread_count(self, tenant_id: UUID) -> int:
        stmt = select(func.count(ContactMessage.id)).where(
            ContactMessage.tenant_id == tenant_id,
            ContactMessage.read == False,  # noqa: E712
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def _get(self, tenant_id: UUID, message_id: UUID) -> ContactMessage:
        message = await TenantSession(self.db, tenant_id).get(ContactMessage, message_id)
        if message is None:
            raise NotFoundError("Message not found", resource="message", resource_id=str(message_id))
        return message

    async def mark_read(self, tenant_id: UUID, message_id: UUID, read: bool = True) -> ContactMessage:
        message = await self._get(tenant_id, message_id)
        message.read = read
        await self.db.flush()
        await self.db.refresh(message)
        return message

    async def delete(self, tenant_id: UUID, message_id: UUID) -> None:
        message = await self._get(tenant_id, message_id)
        await self.db.delete(message)
        await self.db.flush()


# Type alias for dependency injection
MessageSvc = Annotated[MessageService, Depends(MessageService)]
