"""Tenant context, domain and membership routes."""

from uuid import UUID

from fastapi import APIRouter, Query, Request, status

from zatch.api.dependencies import DBSession
from zatch.core.auth.dependencies import OptionalUser
from zatch.core.permissions import PermissionChecker, require_permission
from zatch.modules.tenants.context import MemberContext, settle_gate
from zatch.modules.tenants.gate import GateState, dns_instructions
from zatch.modules.tenants.models import DomainType
from zatch.modules.tenants.schemas import (
    ContextDomain,
    DomainCreate,
    DomainResponse,
    DomainVerificationResponse,
    MemberCreate,
    MemberResponse,
    MemberRoleUpdate,
    TenantContextResponse,
    TenantResponse,
    TenantSummary,
    TenantUpdate,
)
from zatch.modules.tenants.services import DomainSvc, MembershipSvc, TenantSvc


router = APIRouter(tags=["tenants"])


@router.get(
    "/tenant/context",
    response_model=TenantContextResponse,
    summary="Resolve the tenant for this hostname",
    description=(
        "Runs hostname resolution and the access gate without failing the "
        "request. Blocked outcomes include the screen to render."
    ),
)
async def get_tenant_context(
    request: Request,
    db: DBSession,
    user: OptionalUser,
    domain_type: DomainType = Query(DomainType.ADMIN, alias="type"),
) -> TenantContextResponse:
    outcome = await settle_gate(request, db, domain_type, user)
    resolution = outcome.resolution

    domain = None
    if resolution.domain is not None:
        domain = ContextDomain(
            hostname=resolution.domain.hostname,
            type=resolution.domain.type,
            verified=resolution.domain.verified,
            dns=None if resolution.domain.verified else dns_instructions(resolution.domain),
        )

    permissions = None
    if outcome.state is GateState.ALLOWED and outcome.membership is not None:
        grid = await PermissionChecker(db).permissions_for(outcome.role)
        permissions = {page: perms.as_dict() for page, perms in grid.items()}

    return TenantContextResponse(
        state=outcome.state,
        hostname=resolution.hostname,
        domain_type=resolution.domain_type,
        tenant=(
            TenantSummary.model_validate(resolution.tenant)
            if resolution.is_resolved
            else None
        ),
        domain=domain,
        role=outcome.role,
        is_tenant_member=outcome.is_tenant_member,
        permissions=permissions,
        screen=outcome.screen,
    )


# ============================================================
# Tenant settings
# ============================================================


@router.get("/tenant", response_model=TenantResponse, summary="Current agency")
@require_permission("settings", "view")
async def get_tenant(context: MemberContext) -> TenantResponse:
    return TenantResponse.model_validate(context.tenant)


@router.patch("/tenant", response_model=TenantResponse, summary="Update the current agency")
@require_permission("settings", "edit")
async def update_tenant(
    data: TenantUpdate,
    context: MemberContext,
    service: TenantSvc,
) -> TenantResponse:
    tenant = await service.update_tenant(context.tenant, data)
    return TenantResponse.model_validate(tenant)


# ============================================================
# Domains
# ============================================================


@router.get("/domains", response_model=list[DomainResponse], summary="List domains")
@require_permission("domains", "view")
async def list_domains(context: MemberContext, service: DomainSvc) -> list[DomainResponse]:
    domains = await service.list_domains(context.tenant.id)
    return [DomainResponse.model_validate(domain) for domain in domains]


@router.post(
    "/domains",
    response_model=DomainResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a domain",
    description="Registers a hostname. It resolves only after DNS verification.",
)
@require_permission("domains", "create")
async def add_domain(
    data: DomainCreate,
    context: MemberContext,
    service: DomainSvc,
) -> DomainResponse:
    domain = await service.add_domain(context.tenant.id, data.hostname, data.type)
    return DomainResponse.model_validate(domain)


@router.delete(
    "/domains/{domain_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a domain",
)
@require_permission("domains", "delete")
async def remove_domain(
    domain_id: UUID,
    context: MemberContext,
    service: DomainSvc,
) -> None:
    await service.remove_domain(context.tenant.id, domain_id)


@router.post(
    "/domains/{domain_id}/verify",
    response_model=DomainVerificationResponse,
    summary="Check the domain's DNS TXT record",
)
@require_permission("domains", "edit")
async def verify_domain(
    domain_id: UUID,
    context: MemberContext,
    service: DomainSvc,
) -> DomainVerificationResponse:
    domain = await service.get_domain(context.tenant.id, domain_id)
    return await service.verify(domain)


@router.post(
    "/domains/{domain_id}/primary",
    response_model=DomainResponse,
    summary="Make a domain primary",
)
@require_permission("domains", "edit")
async def set_primary_domain(
    domain_id: UUID,
    context: MemberContext,
    service: DomainSvc,
) -> DomainResponse:
    domain = await service.set_primary(context.tenant.id, domain_id)
    return DomainResponse.model_validate(domain)


# ============================================================
# Members
# ============================================================


@router.get("/members", response_model=list[MemberResponse], summary="List members")
@require_permission("users", "view")
async def list_members(
    context: MemberContext,
    service: MembershipSvc,
) -> list[MemberResponse]:
    members = await service.list_members(context.tenant.id)
    return [MemberResponse.from_membership(member) for member in members]


@router.post(
    "/members",
    response_model=MemberResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a member by email",
)
@require_permission("users", "create")
async def add_member(
    data: MemberCreate,
    context: MemberContext,
    service: MembershipSvc,
) -> MemberResponse:
    membership = await service.add_member(context.membership, data.email, data.role)  # type: ignore[arg-type]
    return MemberResponse.from_membership(membership)


@router.patch(
    "/members/{membership_id}",
    response_model=MemberResponse,
    summary="Change a member's role",
)
@require_permission("users", "edit")
async def change_member_role(
    membership_id: UUID,
    data: MemberRoleUpdate,
    context: MemberContext,
    service: MembershipSvc,
) -> MemberResponse:
    membership = await service.change_role(context.membership, membership_id, data.role)  # type: ignore[arg-type]
    return MemberResponse.from_membership(membership)


@router.delete(
    "/members/{membership_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a member",
)
@require_permission("users", "delete")
async def remove_member(
    membership_id: UUID,
    context: MemberContext,
    service: MembershipSvc,
) -> None:
    await service.remove_member(context.membership, membership_id)  # type: ignore[arg-type]
