#!/usr/bin/env python3
"""
Run the field extractor on one detail page and print the resulting property (or why there is none).
Handy for checking heuristics against a saved page without re-fetching.

Run from project root:
  python scripts/run_extract_one.py https://www.dfimoveis.com.br/imovel/apartamento-2-quartos-1234
  python scripts/run_extract_one.py --file page.html --url https://www.dfimoveis.com.br/imovel/x-1234
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

import config  # noqa: E402
from scrapers.base import FetchError  # noqa: E402
from scrapers.extract import extract_property  # noqa: E402
from scrapers.scraper import create_fetcher  # noqa: E402


async def _fetch(url: str, strategy: str | None) -> str:
    async with create_fetcher(strategy) as fetcher:
        return await fetcher.fetch_html(url, config.get_fetch_timeout_ms())


def main():
    parser = argparse.ArgumentParser(description="Extract one property from a detail page")
    parser.add_argument("url", nargs="?", default=None, help="Detail page URL (fetched unless --file is given)")
    parser.add_argument("--file", default=None, help="Read HTML from this file instead of fetching")
    parser.add_argument("--url", dest="source_url", default=None, help="Source URL to use with --file")
    parser.add_argument("--strategy", choices=config.FETCH_STRATEGIES, default=None)
    args = parser.parse_args()
    config.setup_logging()

    url = args.source_url or args.url
    if not url:
        print("Provide a detail page URL (or --file with --url)", file=sys.stderr)
        sys.exit(1)

    if args.file:
        path = Path(args.file)
        if not path.is_file():
            print(f"File not found: {path}", file=sys.stderr)
            sys.exit(1)
        html = path.read_text(encoding="utf-8", errors="replace")
    else:
        try:
            html = asyncio.run(_fetch(url, args.strategy))
        except FetchError as exc:
            print(f"Fetch failed: {exc}", file=sys.stderr)
            sys.exit(1)

    prop = extract_property(html, url)
    if prop is None:
        print("No valid coordinates on this page; it would be skipped.", file=sys.stderr)
        sys.exit(1)
    print(json.dumps(prop.to_dict(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
