"""Data store client for the hosted TeamSync backend.

Speaks the PostgREST dialect exposed by Supabase under /rest/v1. Row-level
authorization is enforced by the platform based on the bearer token, so
the client never filters by user itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol

import httpx
import structlog

from teamsync_assistant.config import Settings

logger = structlog.get_logger()

FilterOp = Literal["eq", "neq", "lt", "lte", "gt", "gte", "ilike"]


@dataclass(frozen=True)
class Filter:
    column: str
    op: FilterOp
    value: Any

    def as_param(self) -> tuple[str, str]:
        return self.column, f"{self.op}.{self.value}"


@dataclass(frozen=True)
class Order:
    column: str
    ascending: bool = True

    def as_param(self) -> str:
        return f"{self.column}.{'asc' if self.ascending else 'desc'}"


class StoreError(Exception):
    """Raised when a data store request fails."""

    def __init__(
        self,
        message: str,
        *,
        table: str,
        operation: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.table = table
        self.operation = operation
        self.status_code = status_code


class DataStore(Protocol):
    """What the assistant needs from a data store."""

    async def query(
        self,
        table: str,
        filters: list[Filter] | None = None,
        order: Order | None = None,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]: ...

    async def insert(self, table: str, record: dict[str, Any]) -> str: ...

    async def update(self, table: str, filters: list[Filter], patch: dict[str, Any]) -> int: ...


def _affected_count(response: httpx.Response) -> int:
    """Read the exact row count from Content-Range (`0-1/2` or `*/0`)."""
    content_range = response.headers.get("content-range", "")
    _, _, total = content_range.rpartition("/")
    if total.isdigit():
        return int(total)
    if not response.content:
        return 0
    body = response.json()
    return len(body) if isinstance(body, list) else 0


def _rows(response: httpx.Response) -> list[dict[str, Any]]:
    body = response.json()
    if not isinstance(body, list):
        raise TypeError(f"expected a list of rows, got {type(body).__name__}")
    return body


def _inserted_id(response: httpx.Response) -> str:
    body = response.json()
    row = body[0] if isinstance(body, list) else body
    return str(row["id"])


class StoreClient:
    """HTTP client for the projects and tasks tables."""

    def __init__(self, settings: Settings) -> None:
        if not settings.store_configured:
            raise RuntimeError("TEAMSYNC_SUPABASE_URL and TEAMSYNC_SUPABASE_KEY must be set")
        self.base_url = settings.supabase_url.rstrip("/")
        self._api_key = settings.supabase_key
        self._access_token = settings.access_token
        self._timeout = settings.request_timeout
        self._client: httpx.AsyncClient | None = None

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                follow_redirects=True,
                timeout=self._timeout,
            )
        return self._client

    def _table_path(self, table: str) -> str:
        cleaned = table.strip("/")
        if not cleaned or "/" in cleaned:
            raise ValueError(f"Invalid table name: {table!r}")
        return f"/rest/v1/{cleaned}"

    async def _request(self, method: str, table: str, operation: str, **kwargs) -> httpx.Response:
        client = await self._get_client()
        try:
            resp = await client.request(method, self._table_path(table), **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "store_request_failed",
                table=table,
                operation=operation,
                status_code=e.response.status_code,
                error=e.response.text,
            )
            raise StoreError(
                f"{operation} on {table} failed with HTTP {e.response.status_code}",
                table=table,
                operation=operation,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("store_request_failed", table=table, operation=operation, error=str(e))
            raise StoreError(
                f"{operation} on {table} failed: {e.__class__.__name__}",
                table=table,
                operation=operation,
            ) from e
        return resp

    def _decode(self, table: str, operation: str, resp: httpx.Response, parse) -> Any:
        """Apply parse to the response; malformed payloads raise StoreError."""
        try:
            return parse(resp)
        except (ValueError, TypeError, LookupError) as e:
            logger.error(
                "store_response_malformed",
                table=table,
                operation=operation,
                error=f"{e.__class__.__name__}: {e}",
            )
            raise StoreError(
                f"{operation} on {table} returned an unexpected response",
                table=table,
                operation=operation,
                status_code=resp.status_code,
            ) from e

    async def query(
        self,
        table: str,
        filters: list[Filter] | None = None,
        order: Order | None = None,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        params: list[tuple[str, str]] = [("select", columns)]
        params.extend(f.as_param() for f in filters or [])
        if order is not None:
            params.append(("order", order.as_param()))
        if limit is not None:
            params.append(("limit", str(limit)))

        resp = await self._request("GET", table, "query", params=params)
        rows = self._decode(table, "query", resp, _rows)
        logger.debug("store_query", table=table, rows=len(rows))
        return rows

    async def insert(self, table: str, record: dict[str, Any]) -> str:
        resp = await self._request(
            "POST",
            table,
            "insert",
            json=record,
            headers={"Prefer": "return=representation"},
        )
        row_id = self._decode(table, "insert", resp, _inserted_id)
        logger.debug("store_insert", table=table, id=row_id)
        return row_id

    async def update(self, table: str, filters: list[Filter], patch: dict[str, Any]) -> int:
        if not filters:
            # PostgREST would refuse anyway; never patch a whole table
            raise ValueError("update requires at least one filter")
        resp = await self._request(
            "PATCH",
            table,
            "update",
            params=[f.as_param() for f in filters],
            json=patch,
            headers={"Prefer": "return=representation,count=exact"},
        )
        count = self._decode(table, "update", resp, _affected_count)
        logger.debug("store_update", table=table, affected=count)
        return count

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
