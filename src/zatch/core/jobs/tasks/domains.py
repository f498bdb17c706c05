"""Domain verification tasks."""

from typing import Any

import structlog

from zatch.modules.tenants.dns import DnsTxtResolver
from zatch.modules.tenants.services import DomainService


log = structlog.get_logger()


async def verify_pending_domains(ctx: dict[str, Any]) -> dict[str, int]:
    """Re-check the TXT record of every unverified domain."""
    async with ctx["db_session_factory"]() as session:
        verified = await DomainService(session, DnsTxtResolver()).verify_pending()
        await session.commit()

    log.info("verify_pending_domains_complete", verified=verified)
    return {"verified": verified}


async def verify_domain(ctx: dict[str, Any], hostname: str) -> bool:
    """Check one domain right away, e.g. after a user edits DNS."""
    async with ctx["db_session_factory"]() as session:
        result = await DomainService(session, DnsTxtResolver()).verify_by_hostname(hostname)
        await session.commit()

    log.info("verify_domain_complete", hostname=hostname, verified=result.verified)
    return result.verified
