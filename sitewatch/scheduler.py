from __future__ import annotations

"""Seconds-resolution cron schedule and the drift-free loop that drives jobs."""

import asyncio
import re
from datetime import datetime
from typing import Awaitable, Callable

from croniter import CroniterBadCronError, CroniterBadDateError, croniter
from loguru import logger

from .models import utc_now

CRON_FIELD_COUNT = 6
WEEKDAY_FIELD = 5


class ScheduleError(ValueError):
    """Raised when a schedule expression cannot be parsed or never fires."""


def _shift_weekday(match: re.Match[str]) -> str:
    value = int(match.group())
    if not 1 <= value <= 7:
        raise ScheduleError(f"day-of-week value {value} must be in 1-7 (Sunday=1)")
    return str(value - 1)


def to_zero_based_weekdays(field: str) -> str:
    """Map day-of-week numbers 1-7 (Sunday=1) onto croniter's 0-6 (Sunday=0).

    Step sizes after `/` and the occurrence after `#` stay as written; day
    names such as `MON` pass through untouched.
    """
    parts = []
    for part in field.split(","):
        base, slash, step = part.partition("/")
        day, hash_sign, nth = base.partition("#")
        day = re.sub(r"\d+", _shift_weekday, day)
        parts.append(f"{day}{hash_sign}{nth}{slash}{step}")
    return ",".join(parts)


class CronSchedule:
    """Six-field cron expression with seconds first: `sec min hour dom month dow`.

    Day-of-week numbers run 1-7 with Sunday=1.
    """

    def __init__(self, expression: str) -> None:
        self.expression = " ".join(expression.split())
        fields = self.expression.split(" ") if self.expression else []
        if len(fields) != CRON_FIELD_COUNT:
            raise ScheduleError(
                f"cron expression {expression!r} must have {CRON_FIELD_COUNT} fields, got {len(fields)}"
            )
        fields[WEEKDAY_FIELD] = to_zero_based_weekdays(fields[WEEKDAY_FIELD])
        try:
            self._iter = croniter(" ".join(fields), utc_now(), second_at_beginning=True)
        except (CroniterBadCronError, ValueError, KeyError) as exc:
            raise ScheduleError(f"invalid cron expression {expression!r}: {exc}") from exc
        try:
            # well-formed expressions like `0 0 0 30 2 *` still never match a date
            self.next_after(utc_now())
        except CroniterBadDateError as exc:
            raise ScheduleError(f"cron expression {expression!r} never fires: {exc}") from exc

    def next_after(self, moment: datetime) -> datetime:
        """Return the first fire time strictly after `moment`."""
        return self._iter.get_next(datetime, start_time=moment)

    def __repr__(self) -> str:
        return f"CronSchedule({self.expression!r})"


def seconds_until(fire_at: datetime, now: datetime) -> float:
    """Delay before `fire_at`, clamped so a late tick fires immediately."""
    return max((fire_at - now).total_seconds(), 0.0)


async def run_schedule(
    schedule: CronSchedule,
    job: Callable[[], Awaitable[object]],
    *,
    name: str = "job",
    on_error: Callable[[str], None] | None = None,
    clock: Callable[[], datetime] = utc_now,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
    iterations: int | None = None,
) -> int:
    """Run `job` at every fire time of `schedule`.

    The next fire time is recomputed from the wall clock on every iteration
    instead of sleeping a fixed interval, so slow jobs never accumulate drift.
    Anchoring on the previous fire time as well keeps an early wake-up from
    firing the same slot twice. Ticks missed while a job overruns are skipped.

    Runs forever unless `iterations` is given; returns the number of firings.
    """
    fired = 0
    last_fire: datetime | None = None
    while iterations is None or fired < iterations:
        now = clock()
        anchor = now if last_fire is None or now > last_fire else last_fire
        fire_at = schedule.next_after(anchor)
        delay = seconds_until(fire_at, clock())
        await sleep(delay)

        last_fire = fire_at
        fired += 1
        try:
            await job()
        except Exception as exc:
            logger.exception("{} tick at {} failed: {}", name, fire_at, exc)
            if on_error is not None:
                on_error(f"{name} failed: {exc}")
    return fired
