from __future__ import annotations

"""Site list loading; the file is re-read on every cycle."""

from pathlib import Path

from loguru import logger


def parse_sites(text: str) -> list[str]:
    """Keep one URL per non-blank line, skipping `#` comments, in file order."""
    sites: list[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        sites.append(line)
    return sites


def read_sites(path: str | Path) -> list[str]:
    """Read the site list, treating a missing or unreadable file as empty."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("site list {} unreadable, using empty list: {}", path, exc)
        return []
    return parse_sites(text)
