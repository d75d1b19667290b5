# src/devspace_client/api/transport.py

"""
Credential transport.

One httpx.AsyncClient with one cookie jar carries every request (auth and
tasks alike). The server sets the session cookie; this module never reads,
parses or builds credentials itself, it only lets the jar do its job.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import TransportFailure

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class HttpTransport:
    """Async HTTP client wrapper bound to one API origin."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(timeout_seconds, connect=min(timeout_seconds, 5.0))
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=self._timeout,
            headers={"Accept": "application/json"},
            transport=transport,
            follow_redirects=True,
        )
        self.requests_sent = 0

    @property
    def base_url(self) -> str:
        return str(self._client.base_url)

    async def request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        """
        Send one request. Any HTTP status is returned to the caller;
        only failures to get a response raise TransportFailure.
        """
        self.requests_sent += 1
        try:
            return await self._client.request(method, path, json=json)
        except httpx.TimeoutException as exc:
            logger.warning("Timeout on %s %s", method, path)
            raise TransportFailure(f"Timeout on {method} {path}") from exc
        except httpx.HTTPError as exc:
            logger.warning("HTTP error on %s %s: %s", method, path, exc.__class__.__name__)
            raise TransportFailure(f"Request {method} {path} failed: {exc}") from exc

    def clear_credentials(self) -> None:
        """Forget whatever the server stored in the cookie jar."""
        self._client.cookies.clear()

    async def aclose(self) -> None:
        await self._client.aclose()
