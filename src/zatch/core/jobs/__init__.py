"""Background job processing with ARQ.

Domain re-verification and token cleanup run as cron jobs in an ARQ
worker; the API process only holds a pool for enqueueing.
"""

from zatch.core.jobs.registry import close_arq_pool, enqueue, get_arq_pool, init_arq_pool


__all__ = [
    "close_arq_pool",
    "enqueue",
    "get_arq_pool",
    "init_arq_pool",
]
