"""Background job tasks."""

from zatch.core.jobs.tasks.cleanup import cleanup_expired_tokens
from zatch.core.jobs.tasks.domains import verify_domain, verify_pending_domains


__all__ = [
    "cleanup_expired_tokens",
    "verify_domain",
    "verify_pending_domains",
]
