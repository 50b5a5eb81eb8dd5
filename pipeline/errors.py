"""
Errors that abort a whole scrape. Per-page failures never raise; they end up in ScrapingReport.errors.
"""

from scrapers.models import ScrapingReport


class ScrapeError(Exception):
    """Fatal for the request. to_report() gives the failure in report shape for the caller."""

    def to_report(self) -> ScrapingReport:
        return ScrapingReport(success=False, properties=[], total=0, errors=[str(self)])


class InvalidListingUrlError(ScrapeError):
    """Input URL is missing or not on the supported site. Raised before any network call."""


class ListingFetchError(ScrapeError):
    """The listing (search-result) page could not be fetched."""


class FetcherConfigError(ScrapeError):
    """FETCH_STRATEGY is unknown or the chosen fetcher is missing its settings."""
