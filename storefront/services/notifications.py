"""Webhook notifications for new orders and custom requests"""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class SlackNotifier:
    """
    Posts plain-text messages to an incoming webhook.

    Delivery is best effort: a missing webhook or a failed call is logged
    and never fails the request that triggered it.
    """

    def __init__(
        self,
        webhook_url: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.webhook_url = webhook_url
        self._http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self._http_client.aclose()

    async def send(self, message: str) -> bool:
        """Send ``message``; returns True when the webhook accepted it"""
        if not self.webhook_url:
            logger.warning("SLACK_WEBHOOK_URL not configured - skipping notification")
            return False

        try:
            response = await self._http_client.post(self.webhook_url, json={"text": message})
        except httpx.HTTPError as e:
            logger.error(f"Slack notification error: {e}")
            return False

        if response.status_code >= 400:
            logger.error(f"Slack notification failed: {response.status_code} - {response.text}")
            return False

        return True
