"""
Extract a Property from one detail page.

Detail pages have no stable schema, so every field is resolved by an ordered list
of strategies (first non-empty result wins). Adding or reordering a heuristic is
a change to the *_STRATEGIES lists, not to control flow.

Coordinates are mandatory: a page without them yields None.
"""

import math
import re
import uuid
from typing import Callable
from urllib.parse import parse_qs, urljoin, urlparse

from bs4 import BeautifulSoup

from scrapers.content import clean_text, element_text, extract_text, script_texts
from scrapers.models import MAX_TITLE_LENGTH, Property
from scrapers.sites import SITE

_NUM = r"(-?\d+(?:\.\d+)?)"

ASSIGNMENT_LAT_RE = re.compile(r"\blatitude\s*=\s*" + _NUM + r"\s*;", re.I)
ASSIGNMENT_LNG_RE = re.compile(r"\blongitude\s*=\s*" + _NUM + r"\s*;", re.I)
LATLNG_CALL_RE = re.compile(r"LatLng\(\s*" + _NUM + r"\s*,\s*" + _NUM + r"\s*\)")
LOOSE_LAT_RE = re.compile(r"[\"']?\b(?:latitude|lat)\b[\"']?\s*[:=]\s*[\"']?" + _NUM, re.I)
LOOSE_LNG_RE = re.compile(r"[\"']?\b(?:longitude|lng)\b[\"']?\s*[:=]\s*[\"']?" + _NUM, re.I)
JSON_PAIR_RE = re.compile(
    r"\"latitude\"\s*:\s*\"?" + _NUM + r"\"?.*?\"longitude\"\s*:\s*\"?" + _NUM,
    re.I | re.S,
)
IFRAME_Q_RE = re.compile(r"^\s*" + _NUM + r"\s*,\s*" + _NUM + r"\s*$")

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")
FALLBACK_TITLE = "listing"
FALLBACK_PRICE = "inquire"

Coordinates = tuple[float, float]
CoordinateStrategy = Callable[[BeautifulSoup, list[str]], Coordinates | None]


def _to_float(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        result = float(str(value).strip())
    except ValueError:
        return None
    return result if math.isfinite(result) else None


def _pair(lat: str | None, lng: str | None) -> Coordinates | None:
    lat_f, lng_f = _to_float(lat), _to_float(lng)
    if lat_f is None or lng_f is None:
        return None
    return lat_f, lng_f


# ---------- Coordinate strategies ----------


def coords_from_assignment(soup: BeautifulSoup, scripts: list[str]) -> Coordinates | None:
    """`latitude = -15.87; longitude = -47.96;` inside one script."""
    for body in scripts:
        lat, lng = ASSIGNMENT_LAT_RE.search(body), ASSIGNMENT_LNG_RE.search(body)
        if lat and lng:
            return _pair(lat.group(1), lng.group(1))
    return None


def coords_from_latlng_call(soup: BeautifulSoup, scripts: list[str]) -> Coordinates | None:
    """`new google.maps.LatLng(-15.87, -47.96)`."""
    for body in scripts:
        m = LATLNG_CALL_RE.search(body)
        if m:
            return _pair(m.group(1), m.group(2))
    return None


def coords_from_loose_keys(soup: BeautifulSoup, scripts: list[str]) -> Coordinates | None:
    """lat/lng or latitude/longitude keys, any quoting, `:` or `=`."""
    for body in scripts:
        lat, lng = LOOSE_LAT_RE.search(body), LOOSE_LNG_RE.search(body)
        if lat and lng:
            return _pair(lat.group(1), lng.group(1))
    return None


def coords_from_json_pair(soup: BeautifulSoup, scripts: list[str]) -> Coordinates | None:
    for body in scripts:
        m = JSON_PAIR_RE.search(body)
        if m:
            return _pair(m.group(1), m.group(2))
    return None


def coords_from_data_attributes(soup: BeautifulSoup, scripts: list[str]) -> Coordinates | None:
    lat = lng = None
    for el in soup.select("[data-lat], [data-latitude]"):
        lat = el.get("data-lat") or el.get("data-latitude")
        if _to_float(lat) is not None:
            break
    for el in soup.select("[data-lng], [data-longitude]"):
        lng = el.get("data-lng") or el.get("data-longitude")
        if _to_float(lng) is not None:
            break
    return _pair(lat, lng)


def coords_from_map_iframe(soup: BeautifulSoup, scripts: list[str]) -> Coordinates | None:
    """Embedded map iframe with `?q=<lat>,<lng>`."""
    for iframe in soup.find_all("iframe", src=True):
        query = parse_qs(urlparse(iframe["src"]).query)
        for q in query.get("q", []):
            m = IFRAME_Q_RE.match(q)
            if m:
                return _pair(m.group(1), m.group(2))
    return None


COORDINATE_STRATEGIES: list[CoordinateStrategy] = [
    coords_from_assignment,
    coords_from_latlng_call,
    coords_from_loose_keys,
    coords_from_json_pair,
    coords_from_data_attributes,
    coords_from_map_iframe,
]


def extract_coordinates(soup: BeautifulSoup) -> Coordinates | None:
    """
    First strategy that yields two floats wins; later ones are not tried.
    A 0 in either position counts as missing (a place exactly on the equator
    or prime meridian is dropped; accepted limitation).
    """
    scripts = script_texts(soup)
    for strategy in COORDINATE_STRATEGIES:
        found = strategy(soup, scripts)
        if found is None:
            continue
        lat, lng = found
        if lat == 0 or lng == 0:
            return None
        return lat, lng
    return None


# ---------- Title ----------


def _title_from_heading(soup: BeautifulSoup, site: dict) -> str:
    return element_text(soup.find("h1"))


def _title_from_classes(soup: BeautifulSoup, site: dict) -> str:
    for el in soup.select(", ".join(site["title_selectors"])):
        text = element_text(el)
        if text:
            return text
    return ""


def _title_from_document_title(soup: BeautifulSoup, site: dict) -> str:
    if soup.title is None:
        return ""
    return clean_text(soup.title.get_text().split("|")[0])


TITLE_STRATEGIES = [_title_from_heading, _title_from_classes, _title_from_document_title]


def extract_title(soup: BeautifulSoup, site: dict = SITE) -> str:
    for strategy in TITLE_STRATEGIES:
        title = strategy(soup, site)
        if title:
            return title[:MAX_TITLE_LENGTH]
    return FALLBACK_TITLE


# ---------- Price ----------


def _price_from_elements(soup: BeautifulSoup, site: dict) -> str:
    marker = site["currency_marker"]
    for el in soup.select(", ".join(site["price_selectors"])):
        text = element_text(el)
        if marker in text:
            return text
    return ""


def _price_from_page_text(soup: BeautifulSoup, site: dict) -> str:
    pattern = re.escape(site["currency_marker"]) + r"\s*\d[\d.,]*"
    m = re.search(pattern, extract_text(soup))
    return m.group(0) if m else ""


PRICE_STRATEGIES = [_price_from_elements, _price_from_page_text]


def extract_price(soup: BeautifulSoup, site: dict = SITE) -> str:
    for strategy in PRICE_STRATEGIES:
        price = strategy(soup, site)
        if price:
            return price
    return FALLBACK_PRICE


def parse_price_value(price: str) -> float:
    """
    'R$ 1.250,00' -> 1250.0. Keeps digits and commas, turns the first comma into the
    decimal point and reads the leading number. Anything unparsable is 0.0.
    """
    cleaned = re.sub(r"[^\d,]", "", price or "").replace(",", ".", 1)
    m = re.match(r"\d+(?:\.\d+)?", cleaned)
    return float(m.group(0)) if m else 0.0


# ---------- Image ----------


def _absolute(src: str, site: dict) -> str:
    return src if src.startswith(("http://", "https://")) else urljoin(site["base_url"], src)


def _image_from_photo_keyword(soup: BeautifulSoup, site: dict) -> str:
    for img in soup.find_all("img"):
        # inline data: URIs are lazy-load placeholders
        candidates = [(img.get(attr) or "").strip() for attr in ("src", "data-src")]
        src = next((c for c in candidates if c and not c.startswith("data:")), "")
        if src and any(k in src for k in site["photo_keywords"]):
            return _absolute(src, site)
    return ""


def _image_from_raster(soup: BeautifulSoup, site: dict) -> str:
    for img in soup.find_all("img", src=True):
        src = img["src"].strip()
        lowered = src.lower()
        if not any(ext in lowered for ext in IMAGE_EXTENSIONS):
            continue
        if "logo" in lowered or "icon" in lowered:
            continue
        return _absolute(src, site)
    return ""


def _image_from_og_meta(soup: BeautifulSoup, site: dict) -> str:
    meta = soup.find("meta", attrs={"property": "og:image"})
    content = (meta.get("content") or "").strip() if meta else ""
    return _absolute(content, site) if content else ""


IMAGE_STRATEGIES = [_image_from_photo_keyword, _image_from_raster, _image_from_og_meta]


def extract_image(soup: BeautifulSoup, site: dict = SITE) -> str:
    for strategy in IMAGE_STRATEGIES:
        image = strategy(soup, site)
        if image:
            return image
    return site["placeholder_image"]


# ---------- Identifier ----------


def listing_id(url: str) -> str:
    """Last path segment of the URL, or a random token when the path ends in '/' or is empty."""
    segment = urlparse(url).path.split("/")[-1]
    return segment or uuid.uuid4().hex[:9]


def extract_property(html: str, source_url: str, site: dict = SITE) -> Property | None:
    """Build a Property from detail-page HTML, or None when no coordinates resolve."""
    soup = BeautifulSoup(html or "", "html.parser")
    coords = extract_coordinates(soup)
    if coords is None:
        return None
    latitude, longitude = coords

    price = extract_price(soup, site)
    return Property(
        id=listing_id(source_url),
        title=extract_title(soup, site),
        price=price,
        price_value=parse_price_value(price),
        image=extract_image(soup, site),
        link=source_url,
        latitude=latitude,
        longitude=longitude,
    )
