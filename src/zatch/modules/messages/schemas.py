"""Pydantic schemas for contact messages."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from zatch.core.constants import MAX_NAME_LENGTH


class MessageCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    email: EmailStr
    phone: str | None = Field(None, max_length=30)
    message: str = Field(..., min_length=1, max_length=5000)
    property_id: UUID | None = None


class MessageResponse(BaseModel):
    id: UUID
    property_id: UUID | None
    name: str
    email: str
    phone: str | None
    message: str
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UnreadCountResponse(BaseModel):
    unread: int
