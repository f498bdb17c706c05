"""DNS TXT lookups over DNS-over-HTTPS.

Domain ownership is proven by publishing the domain's verify token in a TXT
record at ``_zatch-verify.<hostname>``. Records are fetched through a
JSON DNS-over-HTTPS API (Google's ``dns.google/resolve`` by default).
"""

from typing import Annotated

import httpx
import structlog
from fastapi import Depends

from zatch.config import settings
from zatch.core.constants import DNS_TXT_RECORD_TYPE
from zatch.core.observability import get_tracer


logger = structlog.get_logger()
tracer = get_tracer(__name__)


class DnsTxtResolver:
    """Fetches TXT records. Lookup failures yield no records."""

    def __init__(
        self,
        endpoint: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint or settings.dns_over_https_url
        self.timeout = timeout or settings.dns_timeout_seconds
        self.transport = transport

    async def txt_records(self, name: str) -> list[str]:
        """TXT record values for ``name`` with surrounding quotes removed."""
        with tracer.start_as_current_span("dns_txt_lookup") as span:
            span.set_attribute("dns.name", name)
            try:
                async with httpx.AsyncClient(
                    transport=self.transport, timeout=self.timeout
                ) as client:
                    response = await client.get(
                        self.endpoint,
                        params={"name": name, "type": "TXT"},
                        headers={"Accept": "application/dns-json"},
                    )
                    response.raise_for_status()
                    payload = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("dns_lookup_failed", name=name, error=str(exc))
                return []

        answers = payload.get("Answer") or []
        records = [
            _unquote(answer.get("data", ""))
            for answer in answers
            if answer.get("type") == DNS_TXT_RECORD_TYPE
        ]
        logger.debug("dns_lookup_completed", name=name, records=len(records))
        return records


def _unquote(value: str) -> str:
    # Long TXT values come back as several quoted chunks: "abc" "def"
    return "".join(part for part in value.split('"') if part.strip()).strip()


def get_dns_resolver() -> DnsTxtResolver:
    return DnsTxtResolver()


DnsResolver = Annotated[DnsTxtResolver, Depends(get_dns_resolver)]
