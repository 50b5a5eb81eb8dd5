"""
Text helpers over parsed detail pages: normalized element text, visible page text, inline script bodies.
"""

import re

from bs4 import BeautifulSoup, Tag


def clean_text(value: str | None) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return re.sub(r"\s+", " ", value or "").strip()


def element_text(el: Tag | None) -> str:
    if el is None:
        return ""
    return clean_text(el.get_text(" ", strip=True))


def extract_text(soup: BeautifulSoup) -> str:
    """
    Plain text of the page body (whole document if there is no body).
    Works on a copy so script/style removal does not affect later lookups on soup.
    """
    root = soup.body or soup
    copy = BeautifulSoup(str(root), "html.parser")
    # Remove script/style so they don't leak into text
    for tag in copy.find_all(["script", "style", "noscript"]):
        tag.decompose()
    return clean_text(copy.get_text(separator=" ", strip=True))


def script_texts(soup: BeautifulSoup) -> list[str]:
    """Bodies of inline <script> tags, in document order; empty ones skipped."""
    out: list[str] = []
    for tag in soup.find_all("script"):
        body = tag.string if tag.string is not None else tag.get_text()
        if body and body.strip():
            out.append(body)
    return out
