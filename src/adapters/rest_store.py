"""Store remoto sobre una API REST estilo PostgREST (p.ej. Supabase).

Traducción del contrato `RecordStore`:
- `where`      -> `?col=eq.<valor>`
- `order_by`   -> `order=<col>.asc|desc.nullslast`
- `limit`      -> `limit=<n>`
- mutaciones   -> `Prefer: return=representation` para recibir las filas.

Errores:
- HTTP 409 (unique violation) -> `ConflictError`.
- Resto de HTTP >= 400, timeouts y errores de red -> `TransportError`.
- Sin `backend_url` -> `BackendNotConfiguredError`.
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.errors import BackendNotConfiguredError, ConflictError, TransportError
from core.interfaces.store import Row, Where


_RETURN_REPRESENTATION = {"Prefer": "return=representation"}


def _format_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


def _filter_params(where: Where | None) -> dict[str, str]:
    return {key: _format_value(value) for key, value in (where or {}).items()}


class RestRecordStore:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client

    @property
    def is_configured(self) -> bool:
        return self._client is not None or self._settings.remote_configured

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            if not self._settings.remote_configured:
                raise BackendNotConfiguredError("Remote backend not configured (FAULTCODE_BACKEND_URL)")
            self._client = build_async_client(self._settings)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> list[Row]:
        client = self._get_client()
        try:
            response = await client.request(method, f"/{table}", params=params, json=json, headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} /{table} failed: {exc}") from exc

        if response.status_code == 409:
            raise ConflictError(f"{method} /{table} conflict: {response.text}", status_code=409)
        if response.status_code >= 400:
            raise TransportError(
                f"{method} /{table} returned HTTP {response.status_code}",
                status_code=response.status_code,
            )
        if not response.content:
            return []
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"{method} /{table} returned invalid JSON") from exc
        if isinstance(payload, dict):
            return [payload]
        if not isinstance(payload, list):
            raise TransportError(f"{method} /{table} returned unexpected payload")
        return [row for row in payload if isinstance(row, dict)]

    async def select(
        self,
        table: str,
        *,
        where: Where | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Row]:
        params = {"select": "*", **_filter_params(where)}
        if order_by:
            direction = "desc" if descending else "asc"
            params["order"] = f"{order_by}.{direction}.nullslast"
        if limit is not None:
            params["limit"] = str(max(0, limit))
        return await self._request("GET", table, params=params)

    async def insert(self, table: str, row: Row) -> Row:
        rows = await self._request("POST", table, json=row, headers=_RETURN_REPRESENTATION)
        if not rows:
            raise TransportError(f"POST /{table} returned no representation")
        return rows[0]

    async def update(self, table: str, values: Row, *, where: Where) -> list[Row]:
        return await self._request(
            "PATCH",
            table,
            params=_filter_params(where),
            json=values,
            headers=_RETURN_REPRESENTATION,
        )

    async def delete(self, table: str, *, where: Where) -> list[Row]:
        return await self._request(
            "DELETE",
            table,
            params=_filter_params(where),
            headers=_RETURN_REPRESENTATION,
        )
