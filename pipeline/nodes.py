"""
LangGraph nodes for the scrape pipeline.

The page fetcher and timeouts arrive through the run config
(config["configurable"]), set up by pipeline.graph.scrape.
"""

import logging

from langchain_core.runnables import RunnableConfig

from pipeline.errors import ListingFetchError
from pipeline.report import NO_LISTINGS_FOUND, aggregate
from pipeline.state import PipelineState
from scrapers.base import DEFAULT_TIMEOUT_MS, PageFetcher
from scrapers.links import parse_listing_links
from scrapers.models import MAX_REPORTED_ERRORS
from scrapers.scraper import fetch_listing_page, fetch_properties
from scrapers.sites import SITE

logger = logging.getLogger(__name__)


def _options(config: RunnableConfig) -> dict:
    return (config or {}).get("configurable", {})


def _fetcher(config: RunnableConfig) -> PageFetcher:
    fetcher = _options(config).get("fetcher")
    if fetcher is None:
        raise RuntimeError("No page fetcher in run config (configurable.fetcher)")
    return fetcher


async def fetch_listing_node(state: PipelineState, config: RunnableConfig) -> dict:
    """Fetch the listing page. Failure aborts the whole run with ListingFetchError."""
    url = state["url"]
    fetcher = _fetcher(config)
    timeout_ms = _options(config).get("timeout_ms", DEFAULT_TIMEOUT_MS)
    try:
        html = await fetch_listing_page(fetcher, url, timeout_ms)
    except Exception as exc:
        logger.error("Listing page fetch failed for %s: %s", url, exc)
        raise ListingFetchError(f"failed to fetch listing page: {exc}") from exc
    return {"listing_html": html}


def collect_links_node(state: PipelineState) -> dict:
    links = parse_listing_links(state.get("listing_html") or "", SITE["base_url"])
    logger.info("Found %s detail link(s) on %s", len(links), state.get("url"))
    if not links:
        return {"links": [], "properties": [], "errors": [NO_LISTINGS_FOUND]}
    return {"links": links}


async def fetch_properties_node(state: PipelineState, config: RunnableConfig) -> dict:
    options = _options(config)
    properties, errors = await fetch_properties(
        _fetcher(config),
        state.get("links") or [],
        timeout_ms=options.get("timeout_ms", DEFAULT_TIMEOUT_MS),
        item_timeout_seconds=options.get("item_timeout_seconds"),
        batch_timeout_seconds=options.get("batch_timeout_seconds"),
        on_page_done=options.get("on_page_done"),
    )
    return {"properties": properties, "errors": errors}


def aggregate_node(state: PipelineState) -> dict:
    errors = state.get("errors") or []
    if errors:
        logger.warning("%s error(s); first %s:", len(errors), MAX_REPORTED_ERRORS)
        for i, error in enumerate(errors[:MAX_REPORTED_ERRORS], 1):
            logger.warning("  %s. %s", i, error)
    return {"report": aggregate(state.get("properties") or [], errors)}
