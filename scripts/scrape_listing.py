#!/usr/bin/env python3
"""
Scrape one DFImóveis listing page: find detail pages, extract properties with coordinates,
print a summary and optionally write the report JSON (the shape the map frontend reads).

Usage:
  python scripts/scrape_listing.py https://www.dfimoveis.com.br/aluguel/df/brasilia/apartamento
  python scripts/scrape_listing.py URL -o data/report.json
  python scripts/scrape_listing.py URL --strategy http

Exit code: 0 = at least one property, 1 = no property (report still written), 2 = invalid URL or listing page unreachable.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import config  # noqa: E402
from pipeline import ScrapeError, scrape  # noqa: E402
from scrapers.scraper import create_fetcher  # noqa: E402


def _write_report(path: str, data: dict) -> None:
    out_path = Path(path).resolve()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    print(f"Wrote report to {out_path}", flush=True)


async def main():
    parser = argparse.ArgumentParser(description="Scrape a DFImóveis listing page into map-ready properties")
    parser.add_argument("url", help="Listing (search-result) page URL")
    parser.add_argument("-o", "--output", default=None, help="Optional: write report JSON to this path")
    parser.add_argument(
        "--strategy",
        choices=config.FETCH_STRATEGIES,
        default=None,
        help="Page fetcher (default: FETCH_STRATEGY from .env, else browser)",
    )
    args = parser.parse_args()
    config.setup_logging()

    done = 0

    def on_page_done(url: str, state: str) -> None:
        nonlocal done
        done += 1
        print(f"  [{done}] {state} {url}", flush=True)

    try:
        async with create_fetcher(args.strategy) as fetcher:
            report = await scrape(args.url, fetcher, on_page_done=on_page_done)
    except ScrapeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if args.output:
            _write_report(args.output, exc.to_report().to_dict())
        sys.exit(2)

    print(f"\n{report.total} properties with coordinates, {len(report.errors)} error(s) shown", flush=True)
    for error in report.errors:
        print(f"  - {error}", flush=True)
    if args.output:
        _write_report(args.output, report.to_dict())
    sys.exit(0 if report.success else 1)


if __name__ == "__main__":
    asyncio.run(main())
