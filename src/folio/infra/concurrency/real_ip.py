"""Client key extraction for rate limiting behind a reverse proxy.

The key is resolved from proxy headers in priority order:

1. ``X-Forwarded-For``: leftmost entry (the originating client)
2. ``X-Real-IP``: set by some proxy configs
3. ``"unknown"``: constant placeholder

Every request without either header lands in the same ``"unknown"``
bucket, so unidentifiable clients share one rate-limit budget.  The
socket peer is never used: behind the proxy it is the proxy itself.
"""

from __future__ import annotations

from fastapi import Request

_CLIENT_KEY_HEADER_NAMES = [
    "x-forwarded-for",
    "x-real-ip",
]

UNKNOWN_CLIENT_KEY = "unknown"


def get_client_key(request: Request) -> str:
    """Extract the rate-limit key for the calling client.

    Usable as a FastAPI dependency::

        client_key: str = Depends(get_client_key)
    """
    for header in _CLIENT_KEY_HEADER_NAMES:
        value = request.headers.get(header)
        if value:
            first = value.split(",")[0].strip()
            if first:
                return first

    return UNKNOWN_CLIENT_KEY
