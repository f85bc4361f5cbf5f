from __future__ import annotations

"""One poll cycle: probe every site concurrently and merge results into the store."""

import asyncio
from datetime import datetime
from typing import Callable, Sequence

import aiohttp
from loguru import logger

from .models import Report, StatusEntry, utc_now
from .prober import SiteProber
from .store import StatusStore


class PollCycle:
    """Fan out one probe per site and collect a report numbered by input order."""

    def __init__(
        self,
        store: StatusStore,
        prober: SiteProber,
        max_concurrency: int = 50,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.prober = prober
        self.clock = clock
        self.sem = asyncio.Semaphore(max_concurrency)

    async def _probe_one(self, session: aiohttp.ClientSession, site: str) -> StatusEntry:
        """Probe one site and upsert its entry as soon as the verdict is known."""
        async with self.sem:
            try:
                up = await self.prober.probe(site, session)
            except Exception as exc:
                logger.exception("probe for {} raised unexpectedly: {}", site, exc)
                up = False
        entry = StatusEntry(up=up, checked_at=self.clock())
        self.store.upsert(site, entry)
        return entry

    async def run(self, sites: Sequence[str]) -> Report:
        """Probe all sites and wait for the slowest one before reporting."""
        sites = list(sites)
        if not sites:
            return Report()

        async with self.prober.open_session() as session:
            # gather keeps input order even though probes finish in any order
            entries = await asyncio.gather(*(self._probe_one(session, site) for site in sites))

        report = Report.numbered(entries)
        logger.info("poll cycle done: sites={} down={}", len(report), report.down_count)
        return report
