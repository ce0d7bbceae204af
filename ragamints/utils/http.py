"""JSON-over-HTTP client helper.

The session is created lazily so a client can be built outside of a running
event loop. Query parameters named in ``SECRET_PARAMS`` are masked before
anything is logged.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import aiohttp

from ..core.constants import SOFTWARE

logger = logging.getLogger(__name__)

SECRET_PARAMS = frozenset({"access_token"})

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "User-Agent": SOFTWARE,
}


def redact(params: Mapping[str, Any] | None) -> dict[str, Any]:
    """Copy params with secret values masked."""
    return {
        name: "***" if name in SECRET_PARAMS else value for name, value in (params or {}).items()
    }


class HTTPClient:
    """Async HTTP client wrapper returning decoded JSON bodies."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    def build_url(self, url: str) -> str:
        """Prefix relative URLs with base_url."""
        if self.base_url and not url.startswith("http"):
            return f"{self.base_url}{url}"
        return url

    async def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET url and decode its JSON body.

        The body is decoded whatever the declared content type, some
        endpoints answer JSON as text/html.

        Raises:
            aiohttp.ClientResponseError: On non-2xx responses
        """
        full_url = self.build_url(url)
        logger.debug("http_get", extra={"url": full_url, "params": redact(params)})
        async with self.session.get(full_url, params=params, headers=headers) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
