from __future__ import annotations

"""Runtime service status registry shared by loops and the HTTP surface."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .models import utc_now


@dataclass
class RuntimeStatus:
    """Mutable process counters; the per-site status lives in StatusStore."""

    service_started_at: datetime = field(default_factory=utc_now)
    last_heartbeat_at: datetime | None = None
    last_cycle_at: datetime | None = None
    last_alert_at: datetime | None = None
    last_self_ping_at: datetime | None = None
    last_self_ping_ok: bool | None = None
    last_error: str | None = None
    scheduled_cycles: int = 0
    on_demand_cycles: int = 0
    alerts_sent: int = 0
    self_pings: int = 0

    def mark_heartbeat(self, now: datetime | None = None) -> None:
        """Update generic process heartbeat timestamp."""
        self.last_heartbeat_at = now or utc_now()

    def mark_cycle(self, scheduled: bool = True, now: datetime | None = None) -> None:
        """Record one completed poll cycle."""
        timestamp = now or utc_now()
        if scheduled:
            self.scheduled_cycles += 1
        else:
            self.on_demand_cycles += 1
        self.last_cycle_at = timestamp
        self.mark_heartbeat(timestamp)

    def mark_alert(self, now: datetime | None = None) -> None:
        """Record one successful notification event."""
        timestamp = now or utc_now()
        self.alerts_sent += 1
        self.last_alert_at = timestamp
        self.mark_heartbeat(timestamp)

    def mark_self_ping(self, ok: bool, now: datetime | None = None) -> None:
        timestamp = now or utc_now()
        self.self_pings += 1
        self.last_self_ping_at = timestamp
        self.last_self_ping_ok = ok
        self.mark_heartbeat(timestamp)

    def mark_error(self, error: str, now: datetime | None = None) -> None:
        """Record latest runtime error."""
        self.last_error = error
        self.mark_heartbeat(now or utc_now())

    def heartbeat_age_sec(self, now: datetime | None = None) -> int | None:
        """Return seconds since last heartbeat, or None if not available yet."""
        if self.last_heartbeat_at is None:
            return None
        reference = now or utc_now()
        return max(int((reference - self.last_heartbeat_at).total_seconds()), 0)

    def to_dict(self, now: datetime | None = None) -> dict[str, Any]:
        """JSON-ready view for the status endpoint."""

        def _iso(value: datetime | None) -> str | None:
            return value.isoformat() if value else None

        return {
            "service_started_at": _iso(self.service_started_at),
            "last_heartbeat_at": _iso(self.last_heartbeat_at),
            "heartbeat_age_sec": self.heartbeat_age_sec(now),
            "last_cycle_at": _iso(self.last_cycle_at),
            "last_alert_at": _iso(self.last_alert_at),
            "last_self_ping_at": _iso(self.last_self_ping_at),
            "last_self_ping_ok": self.last_self_ping_ok,
            "last_error": self.last_error,
            "scheduled_cycles": self.scheduled_cycles,
            "on_demand_cycles": self.on_demand_cycles,
            "alerts_sent": self.alerts_sent,
            "self_pings": self.self_pings,
        }
