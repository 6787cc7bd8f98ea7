"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, pool limits and headers for every dispatch unit.
- Eases testing: tests inject an `httpx.MockTransport` instead of the network.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the shared, pooled `httpx.AsyncClient`.

    One client serves every dispatch unit of a run; httpx pools connections
    and is safe to use from concurrent tasks. The per-request deadline is
    enforced by the dispatcher, so the client only bounds connection setup.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {"User-Agent": settings.user_agent}
    if extra_headers:
        headers.update(extra_headers)

    limits = httpx.Limits(
        max_connections=None,
        max_keepalive_connections=settings.max_idle_connections,
        keepalive_expiry=settings.idle_connection_timeout_seconds,
    )
    timeout = httpx.Timeout(None, connect=settings.handshake_timeout_seconds)
    return httpx.AsyncClient(
        timeout=timeout,
        limits=limits,
        headers=headers,
        transport=transport,
    )
