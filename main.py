"""DFImóveis map scraper – scrape one listing page into map-ready properties."""

import sys
from pathlib import Path

# Run the scrape script
sys.path.insert(0, str(Path(__file__).resolve().parent))
from scripts.scrape_listing import main

if __name__ == "__main__":
    import asyncio
    asyncio.run(main())
