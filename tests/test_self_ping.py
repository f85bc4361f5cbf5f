from __future__ import annotations

import asyncio

from sitewatch.runtime_status import RuntimeStatus
from sitewatch.scheduler import CronSchedule
from sitewatch.self_ping import SelfPinger


class DummyProber:
    def __init__(self, verdict: bool) -> None:
        self.verdict = verdict
        self.calls: list[str] = []

    async def probe(self, url: str, session=None) -> bool:
        self.calls.append(url)
        return self.verdict


def test_ping_once_records_outcome() -> None:
    status = RuntimeStatus()
    prober = DummyProber(False)
    pinger = SelfPinger("https://me.example", CronSchedule("24 * * * * *"), prober, status)  # type: ignore[arg-type]

    ok = asyncio.run(pinger.ping_once())

    assert ok is False
    assert prober.calls == ["https://me.example"]
    assert status.self_pings == 1
    assert status.last_self_ping_ok is False


def test_run_drives_fixed_schedule(monkeypatch) -> None:
    captured: dict = {}

    async def fake_run_schedule(schedule, job, *, name, on_error=None, **kwargs):
        captured["schedule"] = schedule
        captured["name"] = name
        captured["on_error"] = on_error
        await job()
        await job()
        return 2

    monkeypatch.setattr("sitewatch.self_ping.run_schedule", fake_run_schedule)
    status = RuntimeStatus()
    prober = DummyProber(True)
    schedule = CronSchedule("24 * * * * *")
    pinger = SelfPinger("https://me.example", schedule, prober, status)  # type: ignore[arg-type]

    asyncio.run(pinger.run())

    assert captured["schedule"] is schedule
    assert captured["name"] == "self-ping"
    assert captured["on_error"] == status.mark_error
    assert prober.calls == ["https://me.example", "https://me.example"]
    assert status.self_pings == 2
    assert status.last_self_ping_ok is True


def test_ping_without_runtime_status() -> None:
    pinger = SelfPinger("https://me.example", CronSchedule("24 * * * * *"), DummyProber(True))  # type: ignore[arg-type]
    assert asyncio.run(pinger.ping_once()) is True
