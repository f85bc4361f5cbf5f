from __future__ import annotations

"""Unified entrypoint: HTTP server, scheduled poll loop and self-ping loop."""

import asyncio
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from .config import Settings, get_settings
from .models import utc_now
from .monitor import MonitorService
from .runtime_status import RuntimeStatus
from .scheduler import CronSchedule, ScheduleError, run_schedule
from .self_ping import SelfPinger
from .server import MonitorServer


def configure_logger(settings: Settings) -> None:
    """Configure file and stdout log sinks for runtime observability."""
    logger.remove()
    logger.add(
        str(Path(settings.LOG_DIR) / "sitewatch_{time:YYYY-MM-DD}.log"),
        level=settings.LOG_LEVEL,
        rotation="00:00",
        retention="14 days",
        enqueue=True,
    )
    logger.add(lambda msg: print(msg, end=""), level=settings.LOG_LEVEL)


async def run_app(settings: Settings | None = None) -> None:
    """Boot every long-running task in one process."""
    settings = settings or get_settings()
    configure_logger(settings)

    # Both schedules are parsed before anything starts; a bad one is fatal.
    poll_schedule = CronSchedule(settings.CRON_EXPRESSION)
    ping_schedule = CronSchedule(settings.SELF_PING_CRON)

    runtime_status = RuntimeStatus()
    service = MonitorService.from_settings(settings, runtime_status=runtime_status)
    pinger = SelfPinger(settings.SELF_HOST, ping_schedule, service.poll_cycle.prober, runtime_status)
    server = MonitorServer(service, runtime_status, host=settings.HOST, port=settings.PORT)

    await server.start()
    logger.info("poll schedule {} self-ping schedule {}", poll_schedule.expression, ping_schedule.expression)
    tasks = [
        asyncio.create_task(
            run_schedule(
                poll_schedule,
                service.scheduled_check,
                name="poll",
                on_error=runtime_status.mark_error,
            ),
            name="poll-loop",
        ),
        asyncio.create_task(pinger.run(), name="self-ping-loop"),
    ]

    try:
        while True:
            runtime_status.mark_heartbeat(now=utc_now())
            done, _ = await asyncio.wait(
                tasks, timeout=settings.HEARTBEAT_INTERVAL_SEC, return_when=asyncio.FIRST_COMPLETED
            )
            # loops never return on their own; any finished task is fatal
            for task in done:
                if task.cancelled():
                    raise RuntimeError(f"{task.get_name()} was cancelled")
                exc = task.exception()
                if exc is not None:
                    logger.opt(exception=exc).critical("{} stopped: {}", task.get_name(), exc)
                    raise exc
                raise RuntimeError(f"{task.get_name()} exited unexpectedly")
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await server.stop()


def main() -> None:
    """Console script entrypoint for the monitor service."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        logger.critical("configuration invalid or missing:\n{}", exc)
        raise SystemExit(1) from exc
    try:
        asyncio.run(run_app(settings))
    except ScheduleError as exc:
        logger.critical("{}", exc)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
