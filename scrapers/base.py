"""
Page fetcher interface plus the Scrapfly strategy (ASP, JS rendering, BR proxy).

Every fetcher returns the final HTML for a URL or raises FetchError.
"""

from abc import ABC, abstractmethod

from scrapfly import ScrapeConfig, ScrapflyClient, ScrapflyError

DEFAULT_TIMEOUT_MS = 20000


class FetchError(Exception):
    """A page could not be fetched: non-2xx status, network error or timeout."""

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message)
        self.url = url


class PageFetcher(ABC):
    """
    Returns raw HTML for a URL. Implementations may hold a long-lived session or
    browser; call aclose() (or use `async with`) to release it.
    """

    name = "base"
    settle_delay_ms = 0

    @abstractmethod
    async def fetch_html(self, url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
        """Fetch url and return its HTML. Raises FetchError on failure."""

    async def aclose(self) -> None:
        """Release any session/browser held by the fetcher."""

    async def __aenter__(self) -> "PageFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


class ScrapflyFetcher(PageFetcher):
    """Fetch through the Scrapfly API with anti-bot bypass and JS rendering."""

    name = "scrapfly"

    def __init__(self, api_key: str, *, settle_delay_ms: int = 1000, country: str = "br") -> None:
        if not api_key:
            raise ValueError("Scrapfly fetcher needs an API key (SCRAPFLY_API_KEY)")
        self.settle_delay_ms = settle_delay_ms
        self._country = country
        self._client = ScrapflyClient(key=api_key)

    async def fetch_html(self, url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
        config = ScrapeConfig(
            url=url,
            asp=True,
            render_js=True,
            rendering_wait=self.settle_delay_ms,
            country=self._country,
            # custom timeouts are only honoured with Scrapfly-side retries off
            retry=False,
            timeout=timeout_ms,
        )
        try:
            response = await self._client.async_scrape(scrape_config=config)
        except ScrapflyError as exc:
            raise FetchError(url, f"Scrapfly error: {exc}") from exc
        except Exception as exc:
            raise FetchError(url, f"Scrapfly request failed: {exc}") from exc
        result = getattr(response, "scrape_result", None) or {}
        content = result.get("content")
        if not content:
            status = result.get("status_code")
            raise FetchError(url, f"Scrapfly returned no content (status={status})")
        return content
