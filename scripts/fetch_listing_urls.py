"""
Fetch one listing page and print the detail-page URLs found on it (no detail fetches).
Optionally export to JSON with -o.

Usage:
  python scripts/fetch_listing_urls.py https://www.dfimoveis.com.br/venda/df/brasilia
  python scripts/fetch_listing_urls.py URL -o data/urls.json --strategy http
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import config  # noqa: E402
from pipeline import ScrapeError, validate_listing_url  # noqa: E402
from scrapers.base import FetchError  # noqa: E402
from scrapers.scraper import create_fetcher, fetch_listing_urls  # noqa: E402


async def main():
    parser = argparse.ArgumentParser(description="List detail-page URLs on a DFImóveis listing page")
    parser.add_argument("url", help="Listing (search-result) page URL")
    parser.add_argument("-o", "--output", default=None, help="Optional: also write JSON to this path")
    parser.add_argument("--strategy", choices=config.FETCH_STRATEGIES, default=None)
    args = parser.parse_args()
    config.setup_logging()

    try:
        url = validate_listing_url(args.url)
        async with create_fetcher(args.strategy) as fetcher:
            links = await fetch_listing_urls(fetcher, url, timeout_ms=config.get_fetch_timeout_ms())
    except (ScrapeError, FetchError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    for link in links:
        print(link)
    print(f"{len(links)} links", file=sys.stderr)

    if args.output:
        out_path = Path(args.output).resolve()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(links, f, ensure_ascii=False, indent=2)
        print(f"Also wrote JSON to {out_path}", file=sys.stderr)


if __name__ == "__main__":
    asyncio.run(main())
