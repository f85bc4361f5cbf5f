from __future__ import annotations

"""Scheduled and on-demand check paths over one shared status store."""

from datetime import datetime
from pathlib import Path
from typing import Callable

from loguru import logger

from .config import Settings
from .models import Report, utc_now
from .notifier import NotificationGateway
from .poll import PollCycle
from .prober import SiteProber
from .runtime_status import RuntimeStatus
from .sites import read_sites
from .store import StatusStore


class MonitorService:
    """Run poll cycles over the configured site list and alert on down sites."""

    def __init__(
        self,
        sites_path: str | Path,
        poll_cycle: PollCycle,
        notifier: NotificationGateway,
        runtime_status: RuntimeStatus | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.sites_path = sites_path
        self.poll_cycle = poll_cycle
        self.notifier = notifier
        self.runtime_status = runtime_status or RuntimeStatus()
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        runtime_status: RuntimeStatus | None = None,
        store: StatusStore | None = None,
    ) -> MonitorService:
        prober = SiteProber(settings.PROBE_TIMEOUT_SEC, connector_limit=settings.MAX_CONCURRENCY * 2)
        store = store if store is not None else StatusStore()
        poll_cycle = PollCycle(store, prober, max_concurrency=settings.MAX_CONCURRENCY)
        notifier = NotificationGateway(settings.API_TG_BOT, settings.CHAT_ID, header=settings.ALERT_HEADER)
        return cls(settings.SECRET_FILE, poll_cycle, notifier, runtime_status=runtime_status)

    @property
    def store(self) -> StatusStore:
        return self.poll_cycle.store

    def current_sites(self) -> list[str]:
        return read_sites(self.sites_path)

    async def _alert(self, report: Report) -> bool:
        sent = await self.notifier.notify(report)
        if sent:
            self.runtime_status.mark_alert(now=self.clock())
        return sent

    async def check_now(self) -> Report:
        """Probe the current site list immediately and report by input position."""
        report = await self.poll_cycle.run(self.current_sites())
        self.runtime_status.mark_cycle(scheduled=False, now=self.clock())
        await self._alert(report)
        return report

    async def scheduled_check(self) -> Report:
        """Probe the current site list, then report and alert from the full store."""
        sites = self.current_sites()
        logger.info("checking... {:%Y-%m-%d %H:%M:%S} sites={}", self.clock(), len(sites))
        await self.poll_cycle.run(sites)
        self.runtime_status.mark_cycle(scheduled=True, now=self.clock())
        report = Report.numbered(entry for _, entry in self.store.snapshot())
        await self._alert(report)
        return report

    def healthcheck(self) -> Report:
        """Current store contents labelled by site."""
        snapshot = self.store.snapshot()
        logger.info("number of websites checked: {}", len(snapshot))
        return Report.by_site(snapshot)
