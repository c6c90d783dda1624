"""
Slack incoming-webhook client.

Two ways to send:
  post(message)  strict: raises on transport errors and non-2xx replies
  send(text)     best effort: failures are logged and swallowed so a Slack
                   outage never breaks the sync that is reporting on itself
"""

import logging

import httpx

logger = logging.getLogger(__name__)


class SlackNotifier:
    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = webhook_url
        self._timeout = timeout
        self._transport = transport

    async def post(self, message: dict) -> None:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(self.webhook_url, json=message)
            resp.raise_for_status()

    async def send(self, text: str) -> bool:
        """Post a plain-text message. Returns True on success, False on any error."""
        try:
            await self.post({"text": text})
            return True
        except Exception as exc:
            logger.warning("Slack webhook post failed: %s", exc)
            return False
