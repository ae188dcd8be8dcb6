"""
Page fetchers for the RFQ pages.

fetch_html() is the listing-page fetch used by the poller: it returns the page
text or None after logging the failure, so one bad source only costs its own
cycle.  fetch_detail() layers the detail-page script lookup and extraction on
top and is strictly best-effort — any failure yields None and the caller
dispatches the listing record as-is.

The shared httpx.AsyncClient carries the User-Agent header and the timeout.
"""
import httpx
from loguru import logger

from src.collectors.base import DetailRecord
from src.collectors.page_data import decode_escapes, find_script
from src.collectors.rfq import DETAIL_MARKERS, extract_detail


async def fetch_html(client: httpx.AsyncClient, url: str) -> str | None:
    try:
        resp = await client.get(url)
        resp.raise_for_status()
        return resp.text
    except httpx.HTTPError as exc:
        logger.error(f"[Scraper] fetch failed {url[:80]}: {exc!r}")
        return None


async def fetch_detail(client: httpx.AsyncClient, url: str) -> DetailRecord | None:
    """Fetch an RFQ's own page and extract its DetailRecord, or None."""
    html = await fetch_html(client, url)
    if html is None:
        return None

    script = find_script(html, *DETAIL_MARKERS)
    if script is None:
        logger.warning(f"[Scraper] no detail script on {url[:80]}")
        return None

    result = extract_detail(decode_escapes(script))
    if not result.success:
        logger.warning(f"[Scraper] detail extraction failed for {url[:80]}: {result.error}")
        return None
    return result.detail
