"""
Scrape pipeline: LangGraph workflow from a listing page URL to a ScrapingReport.
"""

from pipeline.errors import FetcherConfigError, InvalidListingUrlError, ListingFetchError, ScrapeError
from pipeline.graph import app, build_graph, scrape, scrape_sync, validate_listing_url
from pipeline.report import aggregate
from pipeline.state import PipelineState

__all__ = [
    "FetcherConfigError",
    "InvalidListingUrlError",
    "ListingFetchError",
    "PipelineState",
    "ScrapeError",
    "aggregate",
    "app",
    "build_graph",
    "scrape",
    "scrape_sync",
    "validate_listing_url",
]
