"""
Shared fixtures: an in-memory page fetcher and small HTML builders.
No test touches the network.
"""

from __future__ import annotations

import asyncio

import pytest

from scrapers.base import FetchError, PageFetcher

LISTING_URL = "https://www.dfimoveis.com.br/aluguel/df/brasilia/apartamento"


class StubFetcher(PageFetcher):
    """
    Serves canned pages. A value may be HTML, an Exception to raise, or a float
    (seconds to sleep before failing, to exercise timeouts).
    """

    name = "stub"

    def __init__(self, pages: dict[str, object] | None = None) -> None:
        self.pages = dict(pages or {})
        self.calls: list[str] = []
        self.closed = False

    async def fetch_html(self, url: str, timeout_ms: int = 20000) -> str:
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(url, "HTTP 404")
        if isinstance(page, Exception):
            raise page
        if isinstance(page, float):
            await asyncio.sleep(page)
            raise FetchError(url, "slow page finished too late")
        return page

    async def aclose(self) -> None:
        self.closed = True


def detail_page(
    *,
    script: str = "var latitude = -15.80; var longitude = -47.90;",
    title: str = "Apartamento 2 quartos Asa Norte",
    price: str = "R$ 1.250,00",
    image: str = "/fotos/imovel/123.jpg",
) -> str:
    return f"""
    <html>
      <head><title>{title} | DFImóveis</title></head>
      <body>
        <h1>{title}</h1>
        <div class="preco">{price}</div>
        <img src="/img/logo.png">
        <img src="{image}">
        <script>{script}</script>
      </body>
    </html>
    """


def listing_page(hrefs: list[str]) -> str:
    anchors = "\n".join(f'<a href="{href}">ver</a>' for href in hrefs)
    return f"<html><body><div class='resultados'>{anchors}</div></body></html>"


@pytest.fixture()
def stub_fetcher() -> StubFetcher:
    return StubFetcher()
