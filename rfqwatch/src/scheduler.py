"""
Poll scheduler — runs every configured source in order, forever.

One cycle polls the sources sequentially with a short pause between them,
logs a per-source line and a cycle total, then sleeps `interval_s`.  Anything
that escapes a cycle is logged (and handed to `on_error`), followed by the
same sleep: the interval never changes, there is no backoff or jitter.
"""
import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, Sequence

from loguru import logger

from src.collectors.base import SourceConfig
from src.poster.poller import CycleStats, SourcePoller


class PollScheduler:
    def __init__(
        self,
        sources: Sequence[SourceConfig],
        poller: SourcePoller,
        interval_s: float = 30,
        source_pause_s: float = 2,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        on_error: Callable[[str], Awaitable[None]] | None = None,
    ):
        self.sources        = tuple(sources)
        self.poller         = poller
        self.interval_s     = interval_s
        self.source_pause_s = source_pause_s
        self._sleep         = sleep
        self._on_error      = on_error
        self.cycles         = 0

    async def run_cycle(self) -> CycleStats:
        """Poll every source once and return the aggregated stats."""
        totals = CycleStats()
        for i, source in enumerate(self.sources):
            stats = await self.poller.poll(source)
            totals.merge(stats)
            logger.info(
                f"[Scheduler] {source.name}: {stats.total} found, {stats.new} new,"
                f" {stats.sent} sent, {stats.failed} failed"
            )
            if i < len(self.sources) - 1:
                await self._sleep(self.source_pause_s)

        logger.info(
            f"[Scheduler] cycle total: {totals.new} new, {totals.sent} sent,"
            f" {totals.failed} failed ({totals.duplicate} already seen)"
        )
        return totals

    async def run(self, max_cycles: int | None = None, stop_on_error: bool = False) -> None:
        """
        Loop run_cycle() + sleep. Runs until cancelled unless `max_cycles` is
        given; `stop_on_error` re-raises instead of sleeping and retrying.
        """
        logger.info(
            f"[Scheduler] polling {len(self.sources)} sources every {self.interval_s:g}s"
        )
        while max_cycles is None or self.cycles < max_cycles:
            self.cycles += 1
            started = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
            logger.info(f"[Scheduler] cycle #{self.cycles} started at {started}")
            try:
                await self.run_cycle()
            except Exception as exc:
                logger.exception(f"[Scheduler] cycle #{self.cycles} failed: {exc}")
                if stop_on_error:
                    raise
                await self._report(f"rfqwatch cycle #{self.cycles} failed: {exc}")
                logger.info(f"[Scheduler] retrying in {self.interval_s:g}s")
            else:
                logger.info(f"[Scheduler] next cycle in {self.interval_s:g}s")
            await self._sleep(self.interval_s)

    async def _report(self, message: str) -> None:
        if self._on_error is None:
            return
        try:
            await self._on_error(message)
        except Exception as exc:
            logger.warning(f"[Scheduler] error hook failed: {exc}")
