"""Tests for the LINE Messaging API client against a mock transport."""

from __future__ import annotations

import json

import httpx
import pytest

from healthcoach.errors import MessagingError, UpstreamError
from healthcoach.line.client import LineMessagingClient


def _client(handler) -> LineMessagingClient:
    return LineMessagingClient("token-123", "https://api.line.test", transport=httpx.MockTransport(handler))


class TestLineMessagingClient:
    @pytest.mark.asyncio
    async def test_reply_payload(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        await _client(handler).reply("rt-1", [{"type": "text", "text": "hi"}])

        req = seen[0]
        assert req.method == "POST"
        assert str(req.url) == "https://api.line.test/v2/bot/message/reply"
        assert req.headers["authorization"] == "Bearer token-123"
        assert json.loads(req.content) == {"replyToken": "rt-1", "messages": [{"type": "text", "text": "hi"}]}

    @pytest.mark.asyncio
    async def test_push_payload(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        await _client(handler).push("U1", [{"type": "text", "text": "hi"}])

        assert seen[0].url.path == "/v2/bot/message/push"
        assert json.loads(seen[0].content) == {"to": "U1", "messages": [{"type": "text", "text": "hi"}]}

    @pytest.mark.asyncio
    async def test_non_2xx_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"message": "Invalid reply token"})

        with pytest.raises(MessagingError) as exc_info:
            await _client(handler).reply("expired", [{"type": "text", "text": "hi"}])

        assert exc_info.value.status_code == 400
        assert "Invalid reply token" in exc_info.value.body
        assert isinstance(exc_info.value, UpstreamError)

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(MessagingError) as exc_info:
            await _client(handler).push("U1", [])

        assert exc_info.value.status_code is None
