"""
Headless Chromium fetcher (Playwright). Executes page scripts, waits a fixed settle
delay, then snapshots the DOM. One browser per fetcher, launched on first use.
"""

import asyncio
import logging

from playwright.async_api import Browser, Playwright, async_playwright
from playwright.async_api import Error as PWError
from playwright.async_api import TimeoutError as PWTimeoutError

from scrapers.base import DEFAULT_TIMEOUT_MS, FetchError, PageFetcher
from scrapers.direct import BROWSER_HEADERS

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
    "--window-size=1920,1080",
]
VIEWPORT = {"width": 1920, "height": 1080}


class BrowserFetcher(PageFetcher):
    """
    Shared headless browser; every fetch gets its own context/page, closed even on failure.

    settle_delay_ms is a heuristic wait for deferred scripts (map widgets set
    coordinates after load), not a completion guarantee.
    """

    name = "browser"

    def __init__(self, *, settle_delay_ms: int = 1000, headless: bool = True) -> None:
        self.settle_delay_ms = settle_delay_ms
        self.headless = headless
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    async def _get_browser(self) -> Browser:
        async with self._lock:
            if self._browser is None:
                logger.info("Launching headless Chromium")
                self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(
                    headless=self.headless,
                    args=LAUNCH_ARGS,
                )
            return self._browser

    async def fetch_html(self, url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
        try:
            browser = await self._get_browser()
        except PWError as exc:
            raise FetchError(url, f"browser launch failed: {exc}") from exc

        context = None
        try:
            context = await browser.new_context(
                user_agent=BROWSER_HEADERS["User-Agent"],
                viewport=VIEWPORT,
                locale="pt-BR",
            )
            page = await context.new_page()
            response = await page.goto(url, wait_until="load", timeout=timeout_ms)
            if response is not None and response.status >= 400:
                raise FetchError(url, f"HTTP {response.status}")
            if self.settle_delay_ms > 0:
                await asyncio.sleep(self.settle_delay_ms / 1000)
            return await page.content()
        except PWTimeoutError as exc:
            raise FetchError(url, f"timed out after {timeout_ms} ms") from exc
        except PWError as exc:
            raise FetchError(url, f"browser error: {exc}") from exc
        finally:
            if context is not None:
                await context.close()

    async def aclose(self) -> None:
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
