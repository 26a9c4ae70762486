"""Request admission primitives for the chat endpoint.

* **RateLimiter**: fixed-window per-client counter, in-process and
  lock-guarded.  Owned by the application (``app.state``).
* **RateLimitSweeper**: cancellable background task that purges
  expired records to bound memory.
* **get_client_key**: derives the per-client key from proxy headers.
"""

from .limiter import (
    RateLimiter,
    RateLimitRecord,
    build_rate_limiter,
    get_rate_limiter,
)
from .real_ip import UNKNOWN_CLIENT_KEY, get_client_key
from .sweeper import RateLimitSweeper, build_rate_limit_sweeper

__all__ = [
    "RateLimitRecord",
    "RateLimitSweeper",
    "RateLimiter",
    "UNKNOWN_CLIENT_KEY",
    "build_rate_limit_sweeper",
    "build_rate_limiter",
    "get_client_key",
    "get_rate_limiter",
]
