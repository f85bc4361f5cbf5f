from __future__ import annotations

"""Single-request reachability probe built on aiohttp."""

import asyncio

import aiohttp
from loguru import logger


class SiteProber:
    """Issue one bounded GET per call and reduce the outcome to a boolean."""

    def __init__(self, timeout_sec: float, connector_limit: int = 100) -> None:
        self.timeout_sec = timeout_sec
        self.timeout = aiohttp.ClientTimeout(total=timeout_sec)
        self.connector_limit = connector_limit

    def open_session(self) -> aiohttp.ClientSession:
        """Create a session that callers share across one batch of probes."""
        connector = aiohttp.TCPConnector(limit=self.connector_limit, keepalive_timeout=60)
        return aiohttp.ClientSession(connector=connector, timeout=self.timeout)

    async def probe(self, url: str, session: aiohttp.ClientSession | None = None) -> bool:
        """Return True iff `url` answers with a 2xx status before the timeout."""
        if session is None:
            async with self.open_session() as own_session:
                return await self._probe(own_session, url)
        return await self._probe(session, url)

    async def _probe(self, session: aiohttp.ClientSession, url: str) -> bool:
        try:
            async with session.get(url, timeout=self.timeout) as response:
                ok = 200 <= response.status < 300
                if not ok:
                    logger.debug("probe {} returned status {}", url, response.status)
                return ok
        except asyncio.TimeoutError:
            logger.warning("probe {} timed out after {}s", url, self.timeout_sec)
        except aiohttp.ClientError as exc:
            logger.warning("probe {} failed: {}", url, exc)
        except ValueError as exc:
            # yarl rejects some malformed site-list lines before any I/O
            logger.warning("probe {} rejected url: {}", url, exc)
        return False
