import logging
from collections.abc import Sequence
from typing import Any

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
    before_sleep_log,
)

from hyenescores.config import Settings
from hyenescores.store.base import (
    MAX_ROWS,
    Filters,
    Row,
    StoreError,
    TableStore,
    normalize_order,
)

logger = logging.getLogger(__name__)

# Exceptions to retry on
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.ConnectError,
    httpx.RemoteProtocolError,
)


def _encode_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


def _filter_params(filters: Filters | None) -> list[tuple[str, str]]:
    if not filters:
        return []
    return [(column, _encode_value(value)) for column, value in filters.items()]


def _error_from_response(response: httpx.Response) -> StoreError:
    """Build a StoreError from a PostgREST error body ({message, code, details, hint})."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message") or response.reason_phrase
        return StoreError(
            f"{message} (HTTP {response.status_code})",
            code=body.get("code"),
            details=body.get("details") or body.get("hint"),
        )
    return StoreError(
        f"{response.reason_phrase or 'Request failed'} (HTTP {response.status_code})",
        code=str(response.status_code),
    )


class PostgrestStore(TableStore):
    """Client for the hosted PostgREST endpoint (``{url}/rest/v1/{table}``)."""

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        timeout: float = 30.0,
        max_rows: int = MAX_ROWS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.api_key = api_key
        self.timeout = timeout
        self.max_rows = max_rows
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "PostgrestStore":
        return cls(
            settings.supabase_url,
            settings.supabase_key,
            timeout=settings.store_request_timeout_seconds,
            max_rows=settings.store_page_size,
        )

    def get_headers(self, prefer: str | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=30),
        retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _make_request(
        self,
        method: str,
        table: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> httpx.Response:
        """
        Make an HTTP request with automatic retry on transient failures.

        Retries up to 3 times with exponential backoff on connection
        timeouts, read timeouts, and connection errors. HTTP error statuses
        are returned as-is and never retried.
        """
        async with httpx.AsyncClient(
            follow_redirects=True, transport=self._transport
        ) as client:
            request_kwargs: dict[str, Any] = {
                "headers": self.get_headers(prefer),
                "params": params,
                "timeout": self.timeout,
            }
            if json is not None:
                request_kwargs["json"] = json
            return await client.request(
                method.upper(), f"{self.base_url}/{table}", **request_kwargs
            )

    async def _request(self, method: str, table: str, **kwargs: Any) -> Any:
        try:
            response = await self._make_request(method, table, **kwargs)
        except httpx.HTTPError as e:
            raise StoreError(f"Request to {table} failed: {e}", code="transport") from e

        if response.is_error:
            raise _error_from_response(response)
        if response.status_code == 204 or not response.content:
            return []
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"Invalid response from {table}: {e}", code="decode") from e

    async def select(
        self,
        table: str,
        *,
        filters: Filters | None = None,
        order_by: str | Sequence[str] | None = None,
        descending: bool = False,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[Row]:
        params = [("select", "*")]
        params.extend(_filter_params(filters))
        columns = normalize_order(order_by)
        if columns:
            direction = "desc" if descending else "asc"
            params.append(("order", ",".join(f"{c}.{direction}" for c in columns)))
        if offset is not None:
            params.append(("offset", str(offset)))
        if limit is not None:
            params.append(("limit", str(limit)))
        return await self._request("get", table, params=params)

    async def insert(self, table: str, rows: Sequence[Row]) -> list[Row]:
        return await self._request(
            "post", table, json=list(rows), prefer="return=representation"
        )

    async def upsert(
        self, table: str, rows: Sequence[Row], *, on_conflict: Sequence[str]
    ) -> list[Row]:
        return await self._request(
            "post",
            table,
            params=[("on_conflict", ",".join(on_conflict))],
            json=list(rows),
            prefer="resolution=merge-duplicates,return=representation",
        )

    async def update(self, table: str, values: Row, *, filters: Filters) -> list[Row]:
        return await self._request(
            "patch",
            table,
            params=_filter_params(filters),
            json=values,
            prefer="return=representation",
        )

    async def delete(self, table: str, *, filters: Filters) -> None:
        await self._request("delete", table, params=_filter_params(filters))
