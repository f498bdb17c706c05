"""Pydantic schemas for tenants, domains and memberships."""

import re
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from zatch.core.constants import MAX_HOSTNAME_LENGTH, MAX_NAME_LENGTH
from zatch.modules.tenants.gate import DnsInstructions, GateScreen, GateState
from zatch.modules.tenants.models import DomainType, MemberRole


HOSTNAME_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9-_.]*\.[a-zA-Z]{2,}$")


def normalize_domain_input(value: str) -> str:
    """Trim and lowercase a hostname typed by a user, then validate it.

    Raises:
        ValueError: If the value does not look like a hostname
    """
    hostname = value.strip().lower()
    if not HOSTNAME_PATTERN.match(hostname):
        raise ValueError("Invalid hostname, e.g. painel.example.com")
    return hostname


# ============================================================
# Tenant Schemas
# ============================================================


class TenantSummary(BaseModel):
    id: UUID
    name: str
    slug: str
    status: str

    model_config = ConfigDict(from_attributes=True)


class TenantResponse(TenantSummary):
    settings: dict[str, Any]
    created_at: datetime
    updated_at: datetime


class TenantUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=MAX_NAME_LENGTH)
    settings: dict[str, Any] | None = None


# ============================================================
# Domain Schemas
# ============================================================


class DomainCreate(BaseModel):
    hostname: str = Field(..., min_length=4, max_length=MAX_HOSTNAME_LENGTH)
    type: DomainType = DomainType.PUBLIC

    @field_validator("hostname")
    @classmethod
    def validate_hostname(cls, v: str) -> str:
        return normalize_domain_input(v)


class DomainResponse(BaseModel):
    id: UUID
    hostname: str
    type: DomainType
    is_primary: bool
    verified: bool
    verify_token: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DomainVerificationResponse(BaseModel):
    """Result of checking a domain's TXT record."""

    ok: bool
    verified: bool
    message: str
    hostname: str
    expected_host: str
    expected_value: str
    found_records: list[str] = []


# ============================================================
# Membership Schemas
# ============================================================


class MemberCreate(BaseModel):
    email: EmailStr
    role: MemberRole = MemberRole.AGENT

    @field_validator("role")
    @classmethod
    def no_owner_invites(cls, v: MemberRole) -> MemberRole:
        if v is MemberRole.OWNER:
            raise ValueError("Members can be added as admin or agent only")
        return v


class MemberRoleUpdate(BaseModel):
    role: MemberRole


class MemberResponse(BaseModel):
    id: UUID
    user_id: UUID
    email: str
    full_name: str
    role: MemberRole
    created_at: datetime

    @classmethod
    def from_membership(cls, membership: Any) -> "MemberResponse":
        return cls(
            id=membership.id,
            user_id=membership.user_id,
            email=membership.user.email,
            full_name=membership.user.full_name,
            role=membership.role,
            created_at=membership.created_at,
        )


# ============================================================
# Tenant Context Schemas
# ============================================================


class ContextDomain(BaseModel):
    hostname: str
    type: DomainType
    verified: bool
    dns: DnsInstructions | None = None


class TenantContextResponse(BaseModel):
    """What the gate decided for this hostname and caller."""

    state: GateState
    hostname: str
    domain_type: DomainType
    tenant: TenantSummary | None = None
    domain: ContextDomain | None = None
    role: MemberRole | None = None
    is_tenant_member: bool = False
    permissions: dict[str, dict[str, bool]] | None = None
    screen: GateScreen | None = None
