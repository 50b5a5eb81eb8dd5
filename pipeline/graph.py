"""
LangGraph workflow: listing page -> detail links -> properties -> report.
LangSmith: set LANGSMITH_API_KEY in .env to trace runs.
"""

import asyncio
import logging

import config
from langgraph.graph import END, START, StateGraph

from pipeline.errors import FetcherConfigError, InvalidListingUrlError
from pipeline.nodes import aggregate_node, collect_links_node, fetch_listing_node, fetch_properties_node
from pipeline.state import PipelineState
from scrapers.base import PageFetcher
from scrapers.models import ScrapingReport
from scrapers.scraper import create_fetcher
from scrapers.sites import SITE

logger = logging.getLogger(__name__)

config.setup_langsmith_tracing()


def _after_collect_route(state):
    """Route to fetch_properties when links were found, else straight to aggregate."""
    if state.get("links"):
        return "fetch_properties"
    return "aggregate"


def build_graph():
    """Build and return the compiled pipeline graph."""
    graph = StateGraph(PipelineState)

    graph.add_node("fetch_listing", fetch_listing_node)
    graph.add_node("collect_links", collect_links_node)
    graph.add_node("fetch_properties", fetch_properties_node)
    graph.add_node("aggregate", aggregate_node)

    graph.add_edge(START, "fetch_listing")
    graph.add_edge("fetch_listing", "collect_links")
    graph.add_conditional_edges(
        "collect_links",
        _after_collect_route,
        {"fetch_properties": "fetch_properties", "aggregate": "aggregate"},
    )
    graph.add_edge("fetch_properties", "aggregate")
    graph.add_edge("aggregate", END)

    return graph.compile()


app = build_graph()


def validate_listing_url(url: str | None, site: dict = SITE) -> str:
    """Return the stripped URL, or raise InvalidListingUrlError if it is not a URL on the site."""
    url = (url or "").strip()
    if not url or site["domain"] not in url:
        raise InvalidListingUrlError(f"invalid url: provide a {site['domain']} listing url")
    return url


async def scrape(
    url: str,
    fetcher: PageFetcher | None = None,
    *,
    timeout_ms: int | None = None,
    item_timeout_seconds: float | None = None,
    batch_timeout_seconds: float | None = None,
    on_page_done=None,
) -> ScrapingReport:
    """
    Scrape one listing page and its detail pages.

    Raises InvalidListingUrlError (before any fetch), FetcherConfigError or ListingFetchError. Everything
    else, including "no listings found" and per-page failures, is reported in the result.
    A fetcher created here is closed before returning; a passed-in one is left open.
    """
    url = validate_listing_url(url)
    options = {
        "timeout_ms": timeout_ms or config.get_fetch_timeout_ms(),
        "item_timeout_seconds": item_timeout_seconds,
        "batch_timeout_seconds": batch_timeout_seconds,
        "on_page_done": on_page_done,
    }

    owns_fetcher = fetcher is None
    if owns_fetcher:
        try:
            fetcher = create_fetcher()
        except ValueError as exc:
            raise FetcherConfigError(f"fetcher not configured: {exc}") from exc
    try:
        final = await app.ainvoke(
            {"url": url},
            config={"configurable": {"fetcher": fetcher, **options}},
        )
    finally:
        if owns_fetcher:
            await fetcher.aclose()

    report: ScrapingReport = final["report"]
    logger.info("Scrape of %s done: %s properties, success=%s", url, report.total, report.success)
    return report


def scrape_sync(url: str, fetcher: PageFetcher | None = None) -> ScrapingReport:
    """Synchronous wrapper for scrape."""
    return asyncio.run(scrape(url, fetcher))
