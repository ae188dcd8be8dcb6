"""
Source poller — one pass over one listing page:

    fetch → locate PAGE_DATA script → decode escapes → extract push() records
          → per record: seen? → dispatch → remember id

A failed fetch or a page without the script ends the pass with zero stats.
An id is only remembered after its notification was delivered, so a failed
send is retried on the next poll for as long as the RFQ stays listed.
"""
from dataclasses import dataclass, fields
from typing import Protocol

import httpx
from loguru import logger

from src.collectors.base import ListingRecord, SourceConfig, enrich
from src.collectors.page_data import decode_escapes, find_script
from src.collectors.rfq import LISTING_MARKERS, extract_listing
from src.collectors.scraper import fetch_detail, fetch_html
from src.database.seen_ids import SeenIdStore


class Dispatcher(Protocol):
    async def send(self, record: ListingRecord, webhook: str) -> bool: ...


@dataclass
class CycleStats:
    total:     int = 0   # records extracted  (= duplicate + new)
    duplicate: int = 0
    new:       int = 0   # (= sent + failed)
    sent:      int = 0
    failed:    int = 0
    errors:    int = 0   # push() blocks that could not be parsed at all

    def merge(self, other: "CycleStats") -> None:
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))


class SourcePoller:
    def __init__(self, http: httpx.AsyncClient, store: SeenIdStore, dispatcher: Dispatcher):
        self._http      = http
        self.store      = store
        self.dispatcher = dispatcher

    async def poll(self, source: SourceConfig) -> CycleStats:
        stats = CycleStats()

        html = await fetch_html(self._http, source.listing_url)
        if html is None:
            return stats

        script = find_script(html, *LISTING_MARKERS)
        if script is None:
            logger.info(f"[Poller] {source.name}: no PAGE_DATA listing script on page")
            return stats

        extraction   = extract_listing(decode_escapes(script), source.policy)
        stats.total  = len(extraction.records)
        stats.errors = extraction.errors

        for record in extraction.records:
            if self.store.exists(record.id):
                stats.duplicate += 1
                logger.debug(f"[Poller] {source.name}: already sent {record.id}")
                continue

            stats.new += 1
            if await self._dispatch(record, source):
                stats.sent += 1
                # An id-less record is never remembered: it goes out again on
                # every poll for as long as it stays listed.
                if not self.store.add(record.id):
                    logger.warning(f"[Poller] {source.name}: sent record without id, not remembered")
            else:
                stats.failed += 1

        return stats

    async def _dispatch(self, record: ListingRecord, source: SourceConfig) -> bool:
        if source.policy.fetch_details and record.url:
            try:
                record = enrich(record, await fetch_detail(self._http, record.url))
            except Exception as exc:
                logger.warning(f"[Poller] {source.name}: detail enrichment failed for {record.id}: {exc}")

        try:
            return await self.dispatcher.send(record, source.notify_target)
        except Exception as exc:
            logger.error(f"[Poller] {source.name}: dispatch raised for {record.id}: {exc}")
            return False
