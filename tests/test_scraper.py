"""
tests/test_scraper.py

Batch orchestrator: per-page isolation, timeouts, waves, terminal states.
Coroutines are driven with asyncio.run; the fetcher is an in-memory stub.
"""

from __future__ import annotations

import asyncio

import pytest

from scrapers.base import FetchError
from scrapers.scraper import (
    FETCH_FAILED,
    PARSE_SKIPPED,
    PARSED,
    create_fetcher,
    fetch_listing_urls,
    fetch_properties,
)
from tests.conftest import LISTING_URL, StubFetcher, detail_page, listing_page

BASE = "https://www.dfimoveis.com.br"


def _url(i: int) -> str:
    return f"{BASE}/imovel/apto-{i}"


def _run(fetcher: StubFetcher, urls: list[str], **kwargs):
    kwargs.setdefault("item_timeout_seconds", 5)
    kwargs.setdefault("batch_timeout_seconds", 30)
    return asyncio.run(fetch_properties(fetcher, urls, **kwargs))


def test_mixed_outcomes_are_isolated() -> None:
    fetcher = StubFetcher({
        _url(1): detail_page(),
        _url(2): FetchError(_url(2), "HTTP 503"),
        _url(3): detail_page(script="var nada = true;"),
        _url(4): RuntimeError("connection reset"),
    })
    states: dict[str, str] = {}

    properties, errors = _run(
        fetcher,
        [_url(1), _url(2), _url(3), _url(4)],
        on_page_done=lambda url, state: states.__setitem__(url, state),
    )

    assert [p.link for p in properties] == [_url(1)]
    assert sorted(errors) == sorted([
        f"{_url(2)}: HTTP 503",
        f"{_url(3)}: no valid coordinates",
        f"{_url(4)}: connection reset",
    ])
    assert states == {
        _url(1): PARSED,
        _url(2): FETCH_FAILED,
        _url(3): PARSE_SKIPPED,
        _url(4): FETCH_FAILED,
    }


def test_slow_page_times_out_without_blocking_siblings() -> None:
    fetcher = StubFetcher({_url(1): 5.0, _url(2): detail_page()})

    properties, errors = _run(fetcher, [_url(1), _url(2)], item_timeout_seconds=0.05)

    assert len(properties) == 1
    assert len(errors) == 1
    assert errors[0].startswith(_url(1))
    assert "timed out" in errors[0]


def test_waves_run_sequentially() -> None:
    active = 0
    peak = 0

    class CountingFetcher(StubFetcher):
        async def fetch_html(self, url: str, timeout_ms: int = 20000) -> str:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return await super().fetch_html(url, timeout_ms)

    urls = [_url(i) for i in range(7)]
    fetcher = CountingFetcher({u: detail_page() for u in urls})

    properties, errors = _run(fetcher, urls, batch_size=3)

    assert len(properties) == 7
    assert errors == []
    assert peak == 3


def test_batch_timeout_keeps_settled_pages() -> None:
    fetcher = StubFetcher({_url(1): detail_page(), _url(2): 5.0})

    properties, errors = _run(
        fetcher,
        [_url(1), _url(2)],
        item_timeout_seconds=10,
        batch_timeout_seconds=0.1,
    )

    assert [p.link for p in properties] == [_url(1)]
    assert errors == ["batch stage timed out after 0.1s; 1 page(s) not processed"]


def test_all_errors_returned_untrimmed() -> None:
    urls = [_url(i) for i in range(15)]
    properties, errors = _run(StubFetcher(), urls)
    assert properties == []
    assert len(errors) == 15


def test_empty_url_list() -> None:
    assert _run(StubFetcher(), []) == ([], [])


def test_fetch_listing_urls() -> None:
    fetcher = StubFetcher({LISTING_URL: listing_page(["/imovel/a", "/imovel/b"])})
    links = asyncio.run(fetch_listing_urls(fetcher, LISTING_URL))
    assert links == [f"{BASE}/imovel/a", f"{BASE}/imovel/b"]


def test_create_fetcher_strategies(monkeypatch: pytest.MonkeyPatch) -> None:
    assert create_fetcher("http").name == "http"
    assert create_fetcher("browser").name == "browser"
    monkeypatch.delenv("SCRAPFLY_API_KEY", raising=False)
    with pytest.raises(ValueError):
        create_fetcher("scrapfly")
    with pytest.raises(ValueError):
        create_fetcher("carrier-pigeon")
