"""
Shared HTTP client utilities for the upstream APIs.

Centralizes httpx client creation with sensible defaults, connection pooling,
timeouts, and a consistent User-Agent, plus a small JSON API base class that
routes every GET through the run's RetryPolicy.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Optional

import httpx

from poll_auditor.shared.exceptions import APIException
from poll_auditor.shared.retry import RetryPolicy

DEFAULT_TIMEOUT = float(os.getenv("POLL_HTTP_TIMEOUT", "30"))
DEFAULT_CONNECT_TIMEOUT = float(os.getenv("POLL_HTTP_CONNECT_TIMEOUT", "10"))
USER_AGENT = os.getenv("POLL_HTTP_UA", "poll-auditor/1.x")


def _build_limits() -> httpx.Limits:
    return httpx.Limits(max_keepalive_connections=20, max_connections=100)


def _build_timeout() -> httpx.Timeout:
    return httpx.Timeout(DEFAULT_TIMEOUT, connect=DEFAULT_CONNECT_TIMEOUT)


def _default_headers() -> dict:
    return {"User-Agent": USER_AGENT}


def build_async_client(
    base_url: str, headers: Optional[Dict[str, str]] = None
) -> httpx.AsyncClient:
    """Build an asynchronous httpx client bound to one API base URL."""
    merged = _default_headers()
    if headers:
        merged.update(headers)
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=_build_timeout(),
        limits=_build_limits(),
        headers=merged,
    )


class JsonApiClient:
    """
    Base class for the JSON APIs the auditor reads from.

    Owns an httpx.AsyncClient (built from base_url unless one is injected)
    and a RetryPolicy applied to every request.
    """

    def __init__(
        self,
        base_url: str,
        retry_policy: RetryPolicy,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._client = client or build_async_client(base_url, headers)
        self._retry = retry_policy

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_once(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise APIException(
                f"GET {path} returned HTTP {e.response.status_code}",
                url=str(e.request.url),
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise APIException(
                f"GET {path} failed: {e.__class__.__name__}: {e}",
                url=path,
            ) from e
        return response.json()

    async def fetch_json(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Fetch and decode a JSON document, retrying transient failures.

        Raises:
            RetryExhaustedException: If the retry budget is exhausted
        """
        return await self._retry.run(
            self._get_once, path, params, operation_name=f"GET {path}"
        )
