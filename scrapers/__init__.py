"""Scrapers: fetch pages, find detail links, extract properties."""

from scrapers.base import FetchError, PageFetcher, ScrapflyFetcher
from scrapers.browser import BrowserFetcher
from scrapers.direct import HttpFetcher
from scrapers.extract import extract_property, parse_price_value
from scrapers.links import MAX_LINKS, parse_listing_links
from scrapers.models import Property, ScrapingReport
from scrapers.scraper import (
    create_fetcher,
    fetch_listing_page,
    fetch_listing_urls,
    fetch_properties,
)
from scrapers.sites import SITE

__all__ = [
    "BrowserFetcher",
    "FetchError",
    "HttpFetcher",
    "MAX_LINKS",
    "PageFetcher",
    "Property",
    "ScrapflyFetcher",
    "ScrapingReport",
    "SITE",
    "create_fetcher",
    "extract_property",
    "fetch_listing_page",
    "fetch_listing_urls",
    "fetch_properties",
    "parse_listing_links",
    "parse_price_value",
]
