"""
Entry point — loads the source list and runs the poll loop until stopped.

Every POLL_INTERVAL_S seconds each source in config/sources.yaml is polled in
order (SOURCE_PAUSE_S apart); new RFQs are pushed to that source's WeCom
webhook and their ids remembered in SEEN_IDS_PATH.

Usage:
    cd rfqwatch
    python src/main.py
    # DRY_RUN=true python src/main.py   → log messages instead of sending
"""
import asyncio
import signal
import sys
from pathlib import Path

import httpx
from loguru import logger

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import (
    DRY_RUN,
    LOG_LEVEL,
    LOGS_DIR,
    MAX_SEEN_IDS,
    POLL_INTERVAL_S,
    REQUEST_TIMEOUT_S,
    SEEN_IDS_PATH,
    SOURCE_PAUSE_S,
    SOURCES_FILE,
    USER_AGENT,
)
from config.sources import load_sources
from src.database.seen_ids import SeenIdStore
from src.monitoring.alerts import alert_startup, send_alert
from src.poster.client import WebhookClient
from src.poster.poller import SourcePoller
from src.scheduler import PollScheduler


def setup_logging() -> None:
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    logger.remove()
    logger.add(sys.stderr, level=LOG_LEVEL)
    logger.add(
        LOGS_DIR / "rfqwatch_{time:YYYY-MM-DD}.log",
        rotation="00:00",
        retention="14 days",
        level=LOG_LEVEL,
        encoding="utf-8",
    )


async def main() -> None:
    setup_logging()
    logger.info("rfqwatch starting up" + (" [DRY RUN]" if DRY_RUN else ""))

    sources = load_sources(SOURCES_FILE)
    if not sources:
        logger.error(f"No sources configured in {SOURCES_FILE}")
        return

    store = SeenIdStore(SEEN_IDS_PATH, MAX_SEEN_IDS)
    store.load()

    async with httpx.AsyncClient(
        timeout=REQUEST_TIMEOUT_S,
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    ) as http:
        poller    = SourcePoller(http, store, WebhookClient(http, dry_run=DRY_RUN))
        scheduler = PollScheduler(
            sources,
            poller,
            interval_s     = POLL_INTERVAL_S,
            source_pause_s = SOURCE_PAUSE_S,
            on_error       = send_alert,
        )
        await alert_startup(DRY_RUN, len(sources))

        # Graceful shutdown on SIGINT / SIGTERM
        task = asyncio.current_task()
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, task.cancel)

        try:
            await scheduler.run()
        except asyncio.CancelledError:
            logger.info(f"Shutting down after {scheduler.cycles} cycles…")


if __name__ == "__main__":
    asyncio.run(main())
