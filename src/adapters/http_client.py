"""Wrapper de httpx.

Estandariza timeouts, headers y autenticación del backend REST para que
todos los stores remotos se comporten igual. En tests se inyecta un
`httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def build_backend_headers(settings: AppSettings) -> dict[str, str]:
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if settings.backend_api_key:
        headers["apikey"] = settings.backend_api_key
        headers["Authorization"] = f"Bearer {settings.backend_api_key}"
    return headers


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` apuntando al backend configurado."""

    settings = settings or AppSettings()
    headers = build_backend_headers(settings)
    if extra_headers:
        headers.update(extra_headers)
    base_url = (settings.backend_url or "").rstrip("/")
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )
