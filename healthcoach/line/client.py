"""LINE Messaging API client — reply and push, one request each, no retry."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from healthcoach.errors import MessagingError

logger = logging.getLogger(__name__)


class MessageSender(Protocol):
    async def reply(self, reply_token: str, messages: list[dict[str, Any]]) -> None: ...

    async def push(self, user_id: str, messages: list[dict[str, Any]]) -> None: ...


class LineMessagingClient:
    def __init__(
        self,
        access_token: str,
        base_url: str = "https://api.line.me",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._access_token = access_token
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    async def _post(self, path: str, payload: dict[str, Any]) -> None:
        headers = {"Authorization": f"Bearer {self._access_token}"}
        try:
            async with httpx.AsyncClient(base_url=self._base_url, transport=self._transport) as client:
                response = await client.post(path, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise MessagingError(None, str(exc)) from exc

        if response.is_error:
            logger.error("LINE %s returned %s: %s", path, response.status_code, response.text)
            raise MessagingError(response.status_code, response.text)

    async def reply(self, reply_token: str, messages: list[dict[str, Any]]) -> None:
        await self._post("/v2/bot/message/reply", {"replyToken": reply_token, "messages": messages})

    async def push(self, user_id: str, messages: list[dict[str, Any]]) -> None:
        await self._post("/v2/bot/message/push", {"to": user_id, "messages": messages})
