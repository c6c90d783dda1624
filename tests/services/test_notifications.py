"""Tests for the Slack webhook notifier."""

import json

import httpx
import pytest

from finsync.services.notifications import SlackNotifier

WEBHOOK = "https://hooks.slack.test/services/T000/B000/XXX"


class TestSlackNotifier:
    @pytest.mark.asyncio
    async def test_post_sends_json(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, text="ok")

        notifier = SlackNotifier(WEBHOOK, transport=httpx.MockTransport(handler))
        await notifier.post({"text": "hello", "blocks": []})

        assert seen == {"url": WEBHOOK, "body": {"text": "hello", "blocks": []}}

    @pytest.mark.asyncio
    async def test_post_raises_on_error_status(self):
        notifier = SlackNotifier(
            WEBHOOK, transport=httpx.MockTransport(lambda request: httpx.Response(404, text="no_service"))
        )

        with pytest.raises(httpx.HTTPStatusError):
            await notifier.post({"text": "hello"})

    @pytest.mark.asyncio
    async def test_send_swallows_failures(self, caplog):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        notifier = SlackNotifier(WEBHOOK, transport=httpx.MockTransport(handler))

        assert await notifier.send("✅ done") is False
        assert "Slack webhook post failed" in caplog.text

    @pytest.mark.asyncio
    async def test_send_success(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, text="ok")

        notifier = SlackNotifier(WEBHOOK, transport=httpx.MockTransport(handler))

        assert await notifier.send("✅ done") is True
        assert bodies == [{"text": "✅ done"}]
