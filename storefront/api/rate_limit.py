"""Rate limiting for the public verification proxy."""
from __future__ import annotations

import os

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

VERIFY_LIMIT = os.getenv("RATE_LIMIT_VERIFY", "30/minute")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes"}


def client_key(request: Request) -> str:
    """Limit per client address.

    ``X-Forwarded-For`` is client-controlled, so it only counts when the shop
    runs behind a reverse proxy that sets it (``TRUST_PROXY_HEADERS=1``).
    """
    if _env_flag("TRUST_PROXY_HEADERS"):
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    return get_remote_address(request)


limiter = Limiter(
    key_func=client_key,
    enabled=not _env_flag("RATE_LIMIT_DISABLED"),
    storage_uri=os.getenv("RATE_LIMIT_REDIS_URL") or "memory://",
)


__all__ = ["VERIFY_LIMIT", "client_key", "limiter"]
