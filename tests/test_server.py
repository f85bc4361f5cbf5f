"""HTTP surface tests through aiohttp's in-process test client."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timedelta, timezone

from aiohttp.test_utils import TestClient, TestServer

from sitewatch.models import StatusEntry
from sitewatch.monitor import MonitorService
from sitewatch.notifier import NotificationGateway
from sitewatch.poll import PollCycle
from sitewatch.runtime_status import RuntimeStatus
from sitewatch.server import MonitorServer
from sitewatch.store import StatusStore

T0 = datetime(2026, 2, 23, 9, 0, 0, tzinfo=timezone.utc)


class DummyProber:
    def __init__(self, verdicts: dict[str, bool]) -> None:
        self.verdicts = verdicts

    def open_session(self):
        return contextlib.nullcontext()

    async def probe(self, url: str, session=None) -> bool:
        return self.verdicts.get(url, False)


class FailingGateway(NotificationGateway):
    """Delivery always fails; endpoints must still answer 200."""

    def __init__(self) -> None:
        super().__init__("https://hook.example/", chat_id="42")
        self.attempts = 0

    async def send_text(self, body: str) -> bool:
        self.attempts += 1
        return False


def _build(tmp_path, verdicts: dict[str, bool]) -> tuple[MonitorServer, FailingGateway]:
    sites = tmp_path / "sites.txt"
    sites.write_text("\n".join(verdicts), encoding="utf-8")
    ticks = iter(T0 + timedelta(seconds=idx) for idx in range(1000))
    cycle = PollCycle(StatusStore(), DummyProber(verdicts), clock=lambda: next(ticks))  # type: ignore[arg-type]
    gateway = FailingGateway()
    service = MonitorService(sites, cycle, gateway, runtime_status=RuntimeStatus())
    return MonitorServer(service), gateway


async def _get_all(server: MonitorServer, paths: list[str]) -> list[tuple[int, str]]:
    client = TestClient(TestServer(server.app))
    await client.start_server()
    try:
        results = []
        for path in paths:
            response = await client.get(path)
            results.append((response.status, await response.text()))
        return results
    finally:
        await client.close()


def test_root_greeting(tmp_path) -> None:
    server, _ = _build(tmp_path, {})
    [(status, body)] = asyncio.run(_get_all(server, ["/"]))
    assert status == 200
    assert body == "Hello, world!"


def test_healthcheck_empty_before_any_probe(tmp_path) -> None:
    server, _ = _build(tmp_path, {"http://a.example": True})
    [(status, body)] = asyncio.run(_get_all(server, ["/healthcheck"]))
    assert status == 200
    assert body == ""


def test_checknow_then_healthcheck(tmp_path) -> None:
    server, gateway = _build(tmp_path, {"http://ok.example": True, "http://down.example": False})

    (check_status, check_body), (health_status, health_body) = asyncio.run(
        _get_all(server, ["/checknow", "/healthcheck"])
    )

    assert check_status == 200
    assert check_body.splitlines()[0].startswith("0: OK at 2026-02-23T09:00:0")
    assert check_body.splitlines()[1].startswith("1: DOWN at 2026-02-23T09:00:0")
    assert gateway.attempts == 1

    assert health_status == 200
    lines = health_body.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("http://ok.example: OK at ")
    assert lines[1].startswith("http://down.example: DOWN at ")


def test_status_endpoint_reports_counters(tmp_path) -> None:
    server, _ = _build(tmp_path, {"http://ok.example": True})
    server.service.store.upsert("http://seen.example", StatusEntry(up=True, checked_at=T0))

    async def _run() -> dict:
        client = TestClient(TestServer(server.app))
        await client.start_server()
        try:
            await client.get("/checknow")
            response = await client.get("/status")
            assert response.status == 200
            return await response.json()
        finally:
            await client.close()

    payload = asyncio.run(_run())
    assert payload["on_demand_cycles"] == 1
    assert payload["scheduled_cycles"] == 0
    assert payload["alerts_sent"] == 0
    assert payload["sites_tracked"] == 2
