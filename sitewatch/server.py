from __future__ import annotations

"""aiohttp HTTP surface over the monitor service."""

from aiohttp import web
from loguru import logger

from .monitor import MonitorService
from .runtime_status import RuntimeStatus


class MonitorServer:
    """Serve greeting, on-demand check, store snapshot and runtime status."""

    def __init__(
        self,
        service: MonitorService,
        runtime_status: RuntimeStatus | None = None,
        host: str = "0.0.0.0",
        port: int = 10000,
    ) -> None:
        self.service = service
        self.runtime_status = runtime_status or service.runtime_status
        self.host = host
        self.port = port
        self.app = web.Application()
        self._runner: web.AppRunner | None = None

        self.app.router.add_get("/", self._handle_root)
        self.app.router.add_get("/checknow", self._handle_check_now)
        self.app.router.add_get("/healthcheck", self._handle_healthcheck)
        self.app.router.add_get("/status", self._handle_status)

    async def start(self) -> None:
        """Bind and start serving."""
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("running on http://{}:{}", self.host, self.port)

    async def stop(self) -> None:
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
        logger.info("http server stopped")

    async def _handle_root(self, request: web.Request) -> web.Response:
        return web.Response(text="Hello, world!")

    async def _handle_check_now(self, request: web.Request) -> web.Response:
        """Run one immediate poll cycle; down sites are a normal 200 result."""
        report = await self.service.check_now()
        return web.Response(text=report.render())

    async def _handle_healthcheck(self, request: web.Request) -> web.Response:
        return web.Response(text=self.service.healthcheck().render())

    async def _handle_status(self, request: web.Request) -> web.Response:
        payload = self.runtime_status.to_dict()
        payload["sites_tracked"] = len(self.service.store)
        return web.json_response(payload)
