"""Instagram REST client implementing the raw media API.

The client performs plain, uncached HTTP calls; caching is layered on top by
PaginatedFetcher. Transport and API errors are raised as RemoteFetchError.
Retries and timeouts are left to the HTTP client.
"""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp

from ..core.exceptions import RemoteFetchError
from ..runtime.pagination import RawPage
from ..utils.http import HTTPClient
from .constants import API_BASE_URL, OEMBED_URL


def _query(params: dict[str, Any]) -> dict[str, str]:
    # aiohttp only accepts str/int/float query values
    return {name: str(value) for name, value in params.items() if value is not None}


class InstagramClient:
    """Raw Instagram v1 API calls."""

    def __init__(
        self,
        access_token: str,
        *,
        http: HTTPClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize client.

        Args:
            access_token: Instagram access token
            http: HTTP client (defaults to one rooted at the v1 API)
            timeout: Request timeout in seconds, for the default HTTP client
        """
        self._access_token = access_token
        self._http = http or HTTPClient(base_url=API_BASE_URL, timeout=timeout)

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        try:
            return await self._http.get(url, params=_query(params or {}))
        except aiohttp.ClientResponseError as e:
            raise RemoteFetchError(f"Request to {url} failed: {e.message}", status_code=e.status) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RemoteFetchError(f"Request to {url} failed: {e!r}") from e

    @staticmethod
    def _check_meta(body: dict[str, Any]) -> dict[str, Any]:
        meta = body.get("meta") or {}
        code = meta.get("code", 200)
        if code != 200:
            message = meta.get("error_message") or meta.get("error_type") or "unknown error"
            raise RemoteFetchError(f"Instagram API error: {message}", status_code=code)
        return body

    async def _get_api(self, url: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        body = await self._get(url, {**(params or {}), "access_token": self._access_token})
        return self._check_meta(body)

    async def user_search(self, user_name: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        """GET /users/search."""
        body = await self._get_api("/users/search", {**params, "q": user_name})
        return list(body.get("data") or [])

    async def user_media_recent(self, user_id: str, params: dict[str, Any]) -> RawPage:
        """GET /users/{user_id}/media/recent, following pagination.next_url."""
        body = await self._get_api(f"/users/{user_id}/media/recent", params)
        return self._raw_page(body)

    def _raw_page(self, body: dict[str, Any]) -> RawPage:
        next_url = (body.get("pagination") or {}).get("next_url")
        if not next_url:
            return RawPage(items=list(body.get("data") or []))

        async def next_page() -> RawPage:
            # next_url already carries every query parameter, token included
            return self._raw_page(self._check_meta(await self._get(next_url)))

        return RawPage(items=list(body.get("data") or []), next=next_page)

    async def oembed(self, media_url: str) -> dict[str, Any]:
        """GET the oembed object of a media URL."""
        try:
            return await self._get(OEMBED_URL, {"callback": "", "url": media_url})
        except RemoteFetchError as e:
            raise RemoteFetchError(
                f"Could not fetch Instagram oembed for {media_url}", status_code=e.status_code
            ) from e

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> InstagramClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
