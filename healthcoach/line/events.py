"""Inbound LINE webhook events, decoded once into a closed set of types.

Anything the bot does not act on (sticker messages, unfollow, beacon, ...) becomes
``UnknownEvent`` instead of being passed around as a raw dict.
"""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel


class _EventBase(BaseModel):
    reply_token: str | None = None
    user_id: str | None = None


class FollowEvent(_EventBase):
    kind: Literal["follow"] = "follow"


class TextMessageEvent(_EventBase):
    kind: Literal["text_message"] = "text_message"
    text: str = ""


class ImageMessageEvent(_EventBase):
    kind: Literal["image_message"] = "image_message"
    message_id: str | None = None


class PostbackEvent(_EventBase):
    kind: Literal["postback"] = "postback"
    data: str = ""


class UnknownEvent(_EventBase):
    kind: Literal["unknown"] = "unknown"
    event_type: str = ""


InboundEvent = Union[FollowEvent, TextMessageEvent, ImageMessageEvent, PostbackEvent, UnknownEvent]


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def decode_event(raw: Any) -> InboundEvent:
    """Decode one element of the webhook ``events`` array. Never raises."""
    if not isinstance(raw, dict):
        return UnknownEvent(event_type=type(raw).__name__)

    event_type = raw.get("type") if isinstance(raw.get("type"), str) else ""
    source = raw.get("source") if isinstance(raw.get("source"), dict) else {}
    common = {
        "reply_token": _str_or_none(raw.get("replyToken")),
        "user_id": _str_or_none(source.get("userId")),
    }

    if event_type == "follow":
        return FollowEvent(**common)

    if event_type == "message":
        message = raw.get("message") if isinstance(raw.get("message"), dict) else {}
        if message.get("type") == "text" and isinstance(message.get("text"), str):
            return TextMessageEvent(text=message["text"], **common)
        if message.get("type") == "image":
            return ImageMessageEvent(message_id=_str_or_none(message.get("id")), **common)
        return UnknownEvent(event_type=f"message:{message.get('type', '')}", **common)

    if event_type == "postback":
        postback = raw.get("postback") if isinstance(raw.get("postback"), dict) else {}
        data = postback.get("data")
        if isinstance(data, str):
            return PostbackEvent(data=data, **common)

    return UnknownEvent(event_type=event_type, **common)


def decode_events(payload: Any) -> list[InboundEvent]:
    """Decode a webhook body. A missing or non-list ``events`` is an empty batch."""
    if not isinstance(payload, dict):
        return []
    events = payload.get("events")
    if not isinstance(events, list):
        return []
    return [decode_event(e) for e in events]
