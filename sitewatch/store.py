from __future__ import annotations

"""Lock-guarded in-memory status map shared by every request and loop."""

import threading

from .models import StatusEntry


class StatusStore:
    """Map site URL to its latest StatusEntry.

    Every access runs under one lock. Entries are immutable and replaced
    whole, and `snapshot` hands out a copy, so callers never hold a
    reference into the live mapping.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, StatusEntry] = {}

    def upsert(self, site: str, entry: StatusEntry) -> None:
        """Insert or fully replace the entry for one site."""
        with self._lock:
            self._entries[site] = entry

    def get(self, site: str) -> StatusEntry | None:
        with self._lock:
            return self._entries.get(site)

    def snapshot(self) -> list[tuple[str, StatusEntry]]:
        """Return an independent copy of all entries in first-seen order."""
        with self._lock:
            return list(self._entries.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
