from __future__ import annotations

"""Keep-alive loop that probes the service's own public address."""

from loguru import logger

from .models import utc_now
from .prober import SiteProber
from .runtime_status import RuntimeStatus
from .scheduler import CronSchedule, run_schedule


class SelfPinger:
    """Generate inbound traffic on a fixed cadence so hosting does not idle the service.

    Shares only the prober with the poll path: results never touch the
    status store and never trigger notifications.
    """

    def __init__(
        self,
        target_url: str,
        schedule: CronSchedule,
        prober: SiteProber,
        runtime_status: RuntimeStatus | None = None,
    ) -> None:
        self.target_url = target_url
        self.schedule = schedule
        self.prober = prober
        self.runtime_status = runtime_status

    async def ping_once(self) -> bool:
        logger.info("awake... {:%Y-%m-%d %H:%M:%S}", utc_now())
        ok = await self.prober.probe(self.target_url)
        if not ok:
            logger.warning("self ping to {} failed", self.target_url)
        if self.runtime_status is not None:
            self.runtime_status.mark_self_ping(ok)
        return ok

    async def run(self) -> None:
        """Loop forever on the fixed schedule."""
        on_error = self.runtime_status.mark_error if self.runtime_status else None
        await run_schedule(self.schedule, self.ping_once, name="self-ping", on_error=on_error)
