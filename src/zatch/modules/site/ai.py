"""SEO title and meta description generation through an AI chat API.

Any OpenAI-compatible ``/chat/completions`` endpoint works. Replies are
expected to hold a JSON object with ``seo_title`` and ``seo_description``;
when they do not, a plain title and description are built from the listing
instead.
"""

import json
import re
from typing import Any

import httpx
import structlog

from zatch.config import settings
from zatch.core.constants import SEO_DESCRIPTION_MAX_LENGTH, SEO_TITLE_MAX_LENGTH
from zatch.core.errors import RateLimitError, ServiceUnavailableError
from zatch.core.observability import get_tracer
from zatch.core.utils.text import truncate
from zatch.modules.properties.models import Property
from zatch.modules.site.pages import STATUS_LABELS, TYPE_LABELS, format_number
from zatch.modules.site.schemas import SeoText


logger = structlog.get_logger()
tracer = get_tracer(__name__)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)

SYSTEM_PROMPT = """Você é um especialista em SEO para sites imobiliários no Brasil.
Sua tarefa é gerar title tags e meta descriptions otimizados para Google.

REGRAS IMPORTANTES:
1. Title SEO: máximo 60 caracteres, incluir palavra-chave principal no início
2. Meta Description: máximo 155 caracteres, incluir CTA (chamada para ação)
3. Usar linguagem persuasiva e profissional em português brasileiro
4. Incluir localização (cidade, bairro) quando disponível
5. Incluir características principais (quartos, área) quando relevantes
6. Evitar caracteres especiais desnecessários

FORMATO DE SAÍDA (JSON):
{
  "seo_title": "título otimizado aqui",
  "seo_description": "descrição meta otimizada aqui"
}"""


def _labels(prop: Property) -> tuple[str, str]:
    return (
        TYPE_LABELS.get(prop.type, prop.type or "Imóvel"),
        STATUS_LABELS.get(prop.status, prop.status or ""),
    )


def build_prompt(prop: Property) -> str:
    kind, status = _labels(prop)
    price = (
        "R$ " + f"{prop.price:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
        if prop.price > 0
        else "Sob consulta"
    )
    features = ", ".join((prop.features or [])[:3])
    return (
        "Gere SEO title e meta description para este imóvel:\n\n"
        f"Tipo: {kind}\n"
        f"Status: {status}\n"
        f"Título atual: {prop.title}\n"
        f"Cidade: {prop.address_city}\n"
        f"Estado: {prop.address_state}\n"
        f"Bairro: {prop.address_neighborhood or ''}\n"
        f"Quartos: {prop.bedrooms}\n"
        f"Banheiros: {prop.bathrooms}\n"
        f"Vagas: {prop.garages}\n"
        f"Área: {format_number(prop.area)}m²\n"
        f"Preço: {price}\n"
        f"Características: {features}\n\n"
        "Retorne APENAS o JSON com seo_title e seo_description."
    )


def fallback_seo(prop: Property) -> SeoText:
    """Deterministic title and description used when the reply is unusable."""
    kind, status = _labels(prop)
    title = f"{kind} {status} em {prop.address_city} {prop.address_state}"
    where = f"no {prop.address_neighborhood}, " if prop.address_neighborhood else ""
    bedrooms = f"{prop.bedrooms} quartos, " if prop.bedrooms > 0 else ""
    area = f"{format_number(prop.area)}m². " if prop.area > 0 else ""
    description = f"{kind} {status} {where}{prop.address_city}. {bedrooms}{area}Agende visita!"
    return SeoText(seo_title=title, seo_description=description)


def parse_reply(content: str, prop: Property) -> SeoText:
    """Pull the first JSON object out of a model reply and clamp its lengths."""
    try:
        match = _JSON_OBJECT_RE.search(content)
        if match is None:
            raise ValueError("no JSON object in reply")
        data: dict[str, Any] = json.loads(match.group(0))
        seo = SeoText(
            seo_title=str(data.get("seo_title") or ""),
            seo_description=str(data.get("seo_description") or ""),
        )
    except ValueError as exc:
        logger.warning("seo_reply_unparseable", property_id=str(prop.id), error=str(exc))
        seo = fallback_seo(prop)

    return SeoText(
        seo_title=truncate(seo.seo_title, SEO_TITLE_MAX_LENGTH),
        seo_description=truncate(seo.seo_description, SEO_DESCRIPTION_MAX_LENGTH),
    )


class SeoGenerator:
    """Client for the chat completions endpoint."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url or settings.ai_gateway_url
        self.api_key = api_key if api_key is not None else settings.ai_api_key
        self.model = model or settings.ai_model
        self.timeout = timeout or settings.ai_timeout_seconds
        self.transport = transport

    async def generate(self, prop: Property) -> SeoText:
        """Generate SEO text for one property.

        Raises:
            RateLimitError: If the AI API answers 429
            ServiceUnavailableError: If the API is not configured, unreachable
                or answers with any other error
        """
        if not self.api_key:
            raise ServiceUnavailableError(
                "SEO generation is not configured",
                error_code="ai_not_configured",
            )

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(prop)},
            ],
        }

        with tracer.start_as_current_span("seo_generate") as span:
            span.set_attribute("property.id", str(prop.id))
            try:
                async with httpx.AsyncClient(
                    transport=self.transport, timeout=self.timeout
                ) as client:
                    response = await client.post(
                        self.url,
                        json=payload,
                        headers={"Authorization": f"Bearer {self.api_key}"},
                    )
            except httpx.HTTPError as exc:
                logger.error("ai_request_failed", error=str(exc))
                raise ServiceUnavailableError(
                    "AI service unreachable",
                    error_code="ai_unavailable",
                ) from exc

        if response.status_code == 429:
            logger.warning("ai_rate_limited")
            raise RateLimitError(
                "AI request limit reached. Try again in a few minutes.",
                error_code="ai_rate_limited",
            )
        if response.is_error:
            logger.error("ai_request_failed", status_code=response.status_code)
            raise ServiceUnavailableError(
                f"AI service error: {response.status_code}",
                error_code="ai_unavailable",
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise ServiceUnavailableError(
                "Empty reply from AI service",
                error_code="ai_unavailable",
            ) from exc

        return parse_reply(content or "", prop)


def get_seo_generator() -> SeoGenerator:
    return SeoGenerator()
