"""Hostname helpers."""

from starlette.requests import Request


def normalize_hostname(value: str) -> str:
    """Lowercase a host header value and drop the port and trailing dot.

    Examples:
        >>> normalize_hostname(" Painel.Example.com:8443 ")
        'painel.example.com'
        >>> normalize_hostname("[::1]:8000")
        '::1'
    """
    host = value.strip().lower()
    if host.startswith("["):
        # IPv6 literal, e.g. [::1]:8000
        host = host[1 : host.find("]")] if "]" in host else host[1:]
    elif host.count(":") == 1:
        host = host.split(":", 1)[0]
    return host.rstrip(".")


def request_hostname(request: Request) -> str:
    """Hostname the client addressed, honouring a reverse proxy's X-Forwarded-Host."""
    forwarded = request.headers.get("X-Forwarded-Host")
    if forwarded:
        return normalize_hostname(forwarded.split(",")[0])
    return normalize_hostname(request.headers.get("Host") or request.url.hostname or "")
