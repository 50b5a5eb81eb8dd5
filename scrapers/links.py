"""
Extract detail-page links from a listing (search-result) page.
"""

import re
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from scrapers.sites import SITE

# Upper bound on detail pages fetched per listing page. Callers wanting more
# pass another listing URL.
MAX_LINKS = 30


def is_on_site(url: str, site: dict = SITE) -> bool:
    """True if url is http(s) on the site's domain or one of its subdomains."""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        return False
    host = (parsed.hostname or "").lower()
    domain = site["domain"]
    return host == domain or host.endswith("." + domain)


def _candidate_hrefs(soup: BeautifulSoup, site: dict):
    detail = re.compile(site["detail_regex"])
    for a in soup.find_all("a", href=True):
        href = (a.get("href") or "").strip()
        if any(part in href for part in site["link_contains"]) and detail.search(href):
            yield href
    selector = ", ".join(f"{card} a[href]" for card in site["card_selectors"])
    for a in soup.select(selector):
        yield (a.get("href") or "").strip()


def parse_listing_links(html: str, base_url: str | None = None, site: dict = SITE) -> list[str]:
    """
    Find <a href> pointing at detail pages (by path segment or by card container),
    resolve relative hrefs against base_url (default: site origin), keep only
    on-site URLs. Deduped in first-seen order, at most MAX_LINKS.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    base = base_url or site["base_url"]
    seen: set[str] = set()
    out: list[str] = []

    for href in _candidate_hrefs(soup, site):
        if not href or href.startswith("#") or href.lower().startswith("javascript:"):
            continue
        full = urljoin(base, href)
        if not is_on_site(full, site) or full in seen:
            continue
        seen.add(full)
        out.append(full)
        if len(out) >= MAX_LINKS:
            break

    return out
