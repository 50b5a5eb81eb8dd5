"""
Fetch listing and detail pages and turn detail pages into properties.

Usage:
  from scrapers.scraper import create_fetcher, fetch_listing_urls, fetch_properties

  async with create_fetcher("http") as fetcher:
      urls = await fetch_listing_urls(fetcher, "https://www.dfimoveis.com.br/aluguel/df/brasilia")
      properties, errors = await fetch_properties(fetcher, urls)
"""

import asyncio
import logging
from typing import Callable

import config
from scrapers.base import DEFAULT_TIMEOUT_MS, PageFetcher, ScrapflyFetcher
from scrapers.browser import BrowserFetcher
from scrapers.direct import HttpFetcher
from scrapers.extract import extract_property
from scrapers.links import parse_listing_links
from scrapers.models import Property
from scrapers.sites import SITE

logger = logging.getLogger(__name__)

# Detail pages dispatched together per wave; waves run one after another.
BATCH_SIZE = 50

# Terminal states of one detail URL
PARSED = "parsed"
PARSE_SKIPPED = "parse-skipped"
FETCH_FAILED = "fetch-failed"

NO_COORDINATES = "no valid coordinates"


def create_fetcher(strategy: str | None = None) -> PageFetcher:
    """Build the page fetcher named by strategy (default: FETCH_STRATEGY from .env)."""
    strategy = strategy or config.get_fetch_strategy()
    if strategy == "browser":
        return BrowserFetcher(settle_delay_ms=config.get_settle_delay_ms())
    if strategy == "http":
        return HttpFetcher(retries=config.get_fetch_retries())
    if strategy == "scrapfly":
        return ScrapflyFetcher(config.get_scrapfly_api_key() or "", settle_delay_ms=config.get_settle_delay_ms())
    raise ValueError(f"Unknown fetch strategy: {strategy!r}")


async def fetch_listing_page(fetcher: PageFetcher, url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> str:
    """Fetch the search-result page. Errors propagate: nothing can be done without it."""
    logger.info("Fetching listing page %s via %s", url, fetcher.name)
    return await fetcher.fetch_html(url, timeout_ms)


async def fetch_listing_urls(
    fetcher: PageFetcher,
    url: str,
    *,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    site: dict = SITE,
) -> list[str]:
    """Fetch a listing page and return its detail-page links (at most 30)."""
    html = await fetch_listing_page(fetcher, url, timeout_ms)
    return parse_listing_links(html, site["base_url"], site)


async def fetch_properties(
    fetcher: PageFetcher,
    urls: list[str],
    *,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    item_timeout_seconds: float | None = None,
    batch_timeout_seconds: float | None = None,
    batch_size: int = BATCH_SIZE,
    on_page_done: Callable[[str, str], None] | None = None,
) -> tuple[list[Property], list[str]]:
    """
    Fetch and parse detail pages in waves of batch_size. Every page in a wave runs
    concurrently and the wave settles completely before the next one starts.

    One page failing (fetch error, timeout, no coordinates) never affects the others:
    it becomes an "<url>: <reason>" entry in errors. Properties and errors are in
    completion order and all of them are returned; trimming is up to the caller.

    Args:
        fetcher: Page fetcher shared by all pages.
        urls: Detail-page URLs.
        timeout_ms: Per-fetch timeout handed to the fetcher.
        item_timeout_seconds: Hard deadline for one page, retries and settle delay included.
        batch_timeout_seconds: Deadline for all waves together; pages settled before it are kept.
        on_page_done: Optional callback (url, state) once a page reaches a terminal state.

    Returns:
        (properties, errors)
    """
    if item_timeout_seconds is None:
        item_timeout_seconds = config.get_item_timeout_seconds()
    if batch_timeout_seconds is None:
        batch_timeout_seconds = config.get_batch_timeout_seconds()

    properties: list[Property] = []
    errors: list[str] = []
    settled: set[str] = set()

    def finish(url: str, state: str, error: str | None = None) -> None:
        # Single event loop: appends from concurrent tasks never interleave
        settled.add(url)
        if error is not None:
            errors.append(f"{url}: {error}")
            logger.warning("%s %s: %s", state, url, error)
        if on_page_done:
            on_page_done(url, state)

    async def fetch_and_extract(url: str) -> Property | None:
        html = await fetcher.fetch_html(url, timeout_ms)
        return extract_property(html, url)

    async def get_one(url: str) -> None:
        try:
            prop = await asyncio.wait_for(fetch_and_extract(url), timeout=item_timeout_seconds)
        except asyncio.TimeoutError:
            finish(url, FETCH_FAILED, f"timed out after {item_timeout_seconds:g}s")
            return
        except Exception as exc:
            finish(url, FETCH_FAILED, str(exc) or exc.__class__.__name__)
            return
        if prop is None:
            finish(url, PARSE_SKIPPED, NO_COORDINATES)
            return
        properties.append(prop)
        finish(url, PARSED)

    async def run_waves() -> None:
        for start in range(0, len(urls), batch_size):
            batch = urls[start:start + batch_size]
            logger.info("Wave %s: %s page(s)", start // batch_size + 1, len(batch))
            await asyncio.gather(*(get_one(u) for u in batch))

    try:
        await asyncio.wait_for(run_waves(), timeout=batch_timeout_seconds)
    except asyncio.TimeoutError:
        pending = len([u for u in urls if u not in settled])
        errors.append(f"batch stage timed out after {batch_timeout_seconds:g}s; {pending} page(s) not processed")
        logger.error("Batch stage timed out with %s page(s) pending", pending)

    logger.info("Parsed %s of %s page(s), %s error(s)", len(properties), len(urls), len(errors))
    return properties, errors
