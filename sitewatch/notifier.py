from __future__ import annotations

"""Webhook notification gateway for down-site alerts."""

from typing import Any

import aiohttp
from loguru import logger

from .models import Report


class NotificationGateway:
    """Post alert messages as `sendMessage` JSON to the configured webhook."""

    def __init__(
        self,
        webhook_url: str,
        chat_id: str,
        header: str = "healthcheck",
        timeout_sec: float = 30.0,
    ) -> None:
        self.webhook_url = webhook_url
        self.chat_id = chat_id
        self.header = header.strip() or "healthcheck"
        self.timeout = aiohttp.ClientTimeout(total=timeout_sec)

    def build_payload(self, body: str) -> dict[str, Any]:
        """Wrap body text with the header line into the webhook JSON object."""
        return {
            "method": "sendMessage",
            "chat_id": self.chat_id,
            "text": f"{self.header}\n{body}",
        }

    async def notify(self, report: Report) -> bool:
        """Send one alert with the whole report if any site is down."""
        if not report.has_down:
            return False
        logger.info("{} of {} sites down, sending alert", report.down_count, len(report))
        return await self.send_text(report.render())

    async def send_text(self, body: str) -> bool:
        """Deliver one message; failures are logged and reported as False."""
        payload = self.build_payload(body)
        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.post(self.webhook_url, json=payload) as response:
                    if response.status >= 300:
                        logger.error("alert webhook returned status {}", response.status)
                        return False
            return True
        except Exception as exc:
            logger.exception("alert delivery failed: {}", exc)
            return False
