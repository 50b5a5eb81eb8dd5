"""
LangGraph state schema for the scrape pipeline.
"""

from typing_extensions import TypedDict

from scrapers.models import Property, ScrapingReport


class PipelineState(TypedDict, total=False):
    """
    State passed between pipeline nodes.

    - url: Listing (search-result) page URL, already validated.
    - listing_html: HTML of the listing page.
    - links: Candidate detail-page URLs found on it.
    - properties: Properties parsed from detail pages, completion order.
    - errors: One message per failed detail page (all of them, untrimmed).
    - report: Final ScrapingReport, set by the aggregate node.
    """

    url: str
    listing_html: str
    links: list[str]
    properties: list[Property]
    errors: list[str]
    report: ScrapingReport
