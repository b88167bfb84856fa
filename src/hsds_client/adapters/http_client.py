"""httpx wrapper.

Why a wrapper:
- Standardises timeouts, headers and base URL for every HSDS call.
- Makes testing easy: callers may pass their own client (e.g. one built on
  `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from hsds_client.core.config import HsdsSettings
from hsds_client.core.errors import UrlError


def parse_base_url(base_url: str) -> httpx.URL:
    """Validate an endpoint URL (http/https with a host)."""

    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise UrlError(f"URL parsing failed: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise UrlError(f"URL parsing failed: '{base_url}' is not an absolute http(s) URL")
    return url


def build_async_client(
    settings: HsdsSettings | None = None,
    *,
    base_url: str | httpx.URL | None = None,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the client defaults.

    Why a builder:
    - Centralises timeouts/headers so every resource API behaves the same.
    - `transport` lets tests route requests to an in-memory handler.
    """

    settings = settings or HsdsSettings()
    url = base_url if isinstance(base_url, httpx.URL) else parse_base_url(base_url or settings.endpoint)
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
