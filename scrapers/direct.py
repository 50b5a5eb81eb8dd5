"""
Plain HTTP GET fetcher with browser-like headers and a fixed retry/backoff policy.
Cheap, but returns server HTML only: pages that set coordinates from deferred scripts need the browser fetcher.
"""

import asyncio
import logging

import httpx

from scrapers.base import DEFAULT_TIMEOUT_MS, FetchError, PageFetcher

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7",
    "Cache-Control": "no-cache",
}


class HttpFetcher(PageFetcher):
    """
    GET with up to `retries` attempts, sleeping backoff_seconds * attempt between them.
    The AsyncClient is created on first use and shared by all concurrent fetches.
    """

    name = "http"

    def __init__(
        self,
        *,
        retries: int = 3,
        backoff_seconds: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.retries = max(1, retries)
        self.backoff_seconds = backoff_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=BROWSER_HEADERS,
                follow_redirects=True,
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=50),
                transport=self._transport,
            )
        return self._client

    async def fetch_html(self, url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
        client = self._get_client()
        last_error: Exception | None = None
        for attempt in range(1, self.retries + 1):
            try:
                response = await client.get(url, timeout=timeout_ms / 1000)
                if response.status_code >= 300:
                    raise FetchError(url, f"HTTP {response.status_code}")
                return response.text
            except httpx.TimeoutException as exc:
                last_error = FetchError(url, f"timed out after {timeout_ms} ms")
                last_error.__cause__ = exc
            except httpx.HTTPError as exc:
                last_error = FetchError(url, f"network error: {exc}")
                last_error.__cause__ = exc
            except FetchError as exc:
                last_error = exc
            logger.debug("Attempt %s/%s failed for %s: %s", attempt, self.retries, url, last_error)
            if attempt < self.retries:
                await asyncio.sleep(self.backoff_seconds * attempt)
        raise last_error or FetchError(url, "all retries failed")

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
