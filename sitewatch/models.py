from __future__ import annotations

"""Domain models shared by the poll cycle, the HTTP surface and notifications."""

from datetime import datetime, timezone
from typing import Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

StatusLabel = Literal["OK", "DOWN"]


def utc_now() -> datetime:
    """Return timezone-aware current UTC time used for probe timestamps."""
    return datetime.now(timezone.utc)


class StatusEntry(BaseModel):
    """Most recent probe outcome for one site."""

    model_config = ConfigDict(frozen=True)

    up: bool
    checked_at: datetime = Field(default_factory=utc_now)

    @field_validator("checked_at")
    @classmethod
    def ensure_aware(cls, value: datetime) -> datetime:
        """Treat naive timestamps as UTC so rendered lines always carry an offset."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def label(self) -> StatusLabel:
        return "OK" if self.up else "DOWN"

    def format_line(self, key: str) -> str:
        """Render `<key>: <OK|DOWN> at <ISO-8601>`."""
        return f"{key}: {self.label} at {self.checked_at.isoformat()}"


class Report(BaseModel):
    """Ordered per-site status rows rendered as one line each."""

    rows: list[tuple[str, StatusEntry]] = Field(default_factory=list)

    @classmethod
    def numbered(cls, entries: Iterable[StatusEntry]) -> Report:
        """Label rows by position, starting at 0."""
        return cls(rows=[(str(idx), entry) for idx, entry in enumerate(entries)])

    @classmethod
    def by_site(cls, snapshot: Iterable[tuple[str, StatusEntry]]) -> Report:
        """Label rows by site URL, keeping snapshot order."""
        return cls(rows=list(snapshot))

    @property
    def down_count(self) -> int:
        return sum(1 for _, entry in self.rows if not entry.up)

    @property
    def has_down(self) -> bool:
        return self.down_count > 0

    def lines(self) -> list[str]:
        return [entry.format_line(key) for key, entry in self.rows]

    def render(self) -> str:
        """Newline-joined lines; empty string when there are no rows."""
        return "\n".join(self.lines())

    def __len__(self) -> int:
        return len(self.rows)
