"""Assemble the final report from the per-page outcomes."""

from scrapers.models import MAX_REPORTED_ERRORS, Property, ScrapingReport

NO_LISTINGS_FOUND = "no listings found"


def aggregate(properties: list[Property], errors: list[str]) -> ScrapingReport:
    """success iff at least one property; only the first MAX_REPORTED_ERRORS errors are kept."""
    return ScrapingReport(
        success=len(properties) > 0,
        properties=list(properties),
        total=len(properties),
        errors=list(errors[:MAX_REPORTED_ERRORS]),
    )
