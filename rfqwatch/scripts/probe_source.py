"""
Source smoke test — fetches one (or every) configured listing page, runs the
extraction, and dry-runs the poller against a throwaway seen-id file.
Nothing is sent and the real history file is not touched.

Usage:
    cd rfqwatch
    python scripts/probe_source.py            # every source
    python scripts/probe_source.py labels     # one source by name
"""
import asyncio
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx
from loguru import logger

from config.settings import REQUEST_TIMEOUT_S, SOURCES_FILE, USER_AGENT
from config.sources import load_sources
from src.collectors.page_data import decode_escapes, find_script
from src.collectors.rfq import LISTING_MARKERS, extract_listing
from src.collectors.scraper import fetch_html
from src.database.seen_ids import SeenIdStore
from src.poster.client import WebhookClient
from src.poster.poller import SourcePoller


async def main(names: list[str]) -> None:
    sources = [s for s in load_sources(SOURCES_FILE) if not names or s.name in names]
    if not sources:
        logger.error(f"no matching sources in {SOURCES_FILE}")
        return

    async with httpx.AsyncClient(
        timeout=REQUEST_TIMEOUT_S,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    ) as http:
        with tempfile.TemporaryDirectory() as tmp:
            store  = SeenIdStore(Path(tmp) / "ids.json", max_size=500)
            poller = SourcePoller(http, store, WebhookClient(http, dry_run=True))

            for source in sources:
                logger.info("=" * 60)
                logger.info(f"{source.name} — {source.listing_url[:80]}")

                html = await fetch_html(http, source.listing_url)
                if html is None:
                    continue
                script = find_script(html, *LISTING_MARKERS)
                if script is None:
                    logger.warning("    listing script not found (page layout changed?)")
                    continue

                extraction = extract_listing(decode_escapes(script), source.policy)
                logger.info(f"    {len(extraction.records)} records, {extraction.errors} parse errors")
                for rec in extraction.records[:5]:
                    logger.info(f"    [{rec.ranking}] {rec.id} {rec.posted_at} {rec.subject[:50]}")

                stats = await poller.poll(source)
                logger.info(f"    dry-run poll: {stats}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
