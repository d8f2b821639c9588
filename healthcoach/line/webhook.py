"""LINE webhook endpoint — signature check, decode, dispatch."""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, HTTPException

from healthcoach.auth import verified_body
from healthcoach.config import settings
from healthcoach.deps import get_message_sender
from healthcoach.line.client import MessageSender
from healthcoach.line.dispatcher import EventDispatcher
from healthcoach.line.events import decode_events

router = APIRouter(tags=["webhook"])


@router.post("/webhook")
@router.post("/api/webhook", include_in_schema=False)
async def webhook(
    body: bytes = Depends(verified_body),
    sender: MessageSender = Depends(get_message_sender),
) -> dict:
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise HTTPException(status_code=400, detail="Invalid JSON body")

    events = decode_events(payload)
    results = await EventDispatcher(sender, settings.app_url).dispatch(events)
    return {"message": "OK", "results": [r.model_dump() for r in results]}
