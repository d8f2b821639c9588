"""Routes a batch of decoded webhook events to per-type handlers.

Events are independent: they are handled concurrently, and one handler failing
is logged and dropped from the results without affecting the rest of the batch.
No state is kept between events.
"""

from __future__ import annotations

import asyncio
import logging

from pydantic import BaseModel

from healthcoach.line import messages
from healthcoach.line.client import MessageSender
from healthcoach.line.events import (
    FollowEvent,
    ImageMessageEvent,
    InboundEvent,
    PostbackEvent,
    TextMessageEvent,
    UnknownEvent,
)

logger = logging.getLogger(__name__)

START_COUNSELING_PHRASES = frozenset({"カウンセリング", "カウンセリング開始", "counseling", "start counseling"})
MYPAGE_PHRASES = frozenset({"マイページ", "mypage", "my page"})


class DispatchResult(BaseModel):
    type: str
    action: str


class EventDispatcher:
    def __init__(self, sender: MessageSender, app_url: str):
        self._sender = sender
        self._app_url = app_url

    async def dispatch(self, events: list[InboundEvent]) -> list[DispatchResult]:
        outcomes = await asyncio.gather(*(self._dispatch_one(e) for e in events))
        return [o for o in outcomes if o is not None]

    async def _dispatch_one(self, event: InboundEvent) -> DispatchResult | None:
        try:
            action = await self._handle(event)
        except Exception:
            logger.exception("Failed to handle %s event", event.kind)
            return None
        return DispatchResult(type=event.kind, action=action)

    async def _handle(self, event: InboundEvent) -> str:
        logger.info("Received %s event from %s", event.kind, event.user_id)

        if isinstance(event, UnknownEvent):
            logger.info("Unhandled event type: %s", event.event_type)
            return "ignored"

        if event.reply_token is None:
            logger.warning("No reply token on %s event", event.kind)
            return "skipped"

        if isinstance(event, FollowEvent):
            await self._reply(event.reply_token, messages.welcome_message())
            return "welcome"

        if isinstance(event, TextMessageEvent):
            return await self._handle_text(event.reply_token, event.text)

        if isinstance(event, ImageMessageEvent):
            await self._reply(event.reply_token, messages.image_ack_message())
            return "image_ack"

        if isinstance(event, PostbackEvent):
            logger.info("Postback data: %s", event.data)
            if event.data == messages.START_COUNSELING_DATA:
                await self._reply(event.reply_token, messages.start_counseling_message(self._app_url))
                return "start_counseling"
            await self._reply(event.reply_token, messages.postback_echo_message(event.data))
            return "postback_echo"

        raise TypeError(f"Unsupported event: {event!r}")

    async def _handle_text(self, reply_token: str, text: str) -> str:
        normalized = text.strip()
        if normalized in START_COUNSELING_PHRASES:
            await self._reply(reply_token, messages.start_counseling_message(self._app_url))
            return "start_counseling"
        if normalized in MYPAGE_PHRASES:
            await self._reply(reply_token, messages.mypage_message(self._app_url))
            return "mypage"
        await self._reply(reply_token, messages.open_app_message(self._app_url))
        return "open_app"

    async def _reply(self, reply_token: str, message: messages.Message) -> None:
        await self._sender.reply(reply_token, [message])
