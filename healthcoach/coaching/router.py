"""Counseling HTTP router — submission, lookup, AI advice and LINE relays."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from healthcoach.coaching.advice import AdviceGenerator
from healthcoach.coaching.models import (
    AdviceRequest,
    AdviceResponse,
    CounselingStatusResponse,
    SendAdviceRequest,
    SendMessageRequest,
    SubmitCounselingRequest,
    SubmitCounselingResponse,
    SuccessResponse,
)
from healthcoach.coaching.store import CounselingStore
from healthcoach.config import settings
from healthcoach.deps import get_advice_generator, get_message_sender, get_store
from healthcoach.line import messages
from healthcoach.line.client import MessageSender

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["counseling"])


def _missing(**fields: object) -> None:
    absent = [name for name, value in fields.items() if not value]
    if absent:
        raise HTTPException(status_code=400, detail=f"Missing {' or '.join(absent)}")


# ---------------------------------------------------------------------------
# /api/submit-counseling
# ---------------------------------------------------------------------------


@router.post("/submit-counseling", response_model=SubmitCounselingResponse)
async def submit_counseling(
    req: SubmitCounselingRequest,
    store: CounselingStore = Depends(get_store),
) -> SubmitCounselingResponse:
    _missing(userId=req.user_id, counselingData=req.counseling_data)

    targets = await store.save(req.user_id, req.counseling_data)
    logger.info("Saved counseling for %s: %s kcal", req.user_id, targets.daily_calories)
    return SubmitCounselingResponse(nutrition_data=targets)


@router.get("/submit-counseling", response_model=CounselingStatusResponse)
async def get_counseling(
    user_id: str | None = Query(default=None, alias="userId"),
    store: CounselingStore = Depends(get_store),
) -> CounselingStatusResponse:
    _missing(userId=user_id)

    record = await store.get(user_id)
    if record is None:
        return CounselingStatusResponse()
    return CounselingStatusResponse(
        is_registered=record.is_registered,
        counseling_data=record.counseling_data,
        nutrition_data=record.nutrition_data,
    )


# ---------------------------------------------------------------------------
# /api/ai-advice
# ---------------------------------------------------------------------------


@router.post("/ai-advice", response_model=AdviceResponse)
async def ai_advice(
    req: AdviceRequest,
    store: CounselingStore = Depends(get_store),
    generator: AdviceGenerator = Depends(get_advice_generator),
) -> AdviceResponse:
    _missing(userId=req.user_id)

    record = await store.get(req.user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="User not found")
    if record.counseling_data is None or record.nutrition_data is None:
        raise HTTPException(status_code=404, detail="Counseling data not found")

    advice = await generator.generate(record.counseling_data, record.nutrition_data)
    return AdviceResponse(ai_advice=advice, nutrition_data=record.nutrition_data)


# ---------------------------------------------------------------------------
# LINE relays
# ---------------------------------------------------------------------------


@router.post("/send-ai-advice", response_model=SuccessResponse)
async def send_ai_advice(
    req: SendAdviceRequest,
    sender: MessageSender = Depends(get_message_sender),
) -> SuccessResponse:
    if not (req.user_id and req.ai_advice and req.nutrition_data):
        raise HTTPException(status_code=400, detail="Missing userId, aiAdvice or nutritionData")

    message = messages.advice_message(req.ai_advice, req.nutrition_data, settings.app_url)
    await sender.push(req.user_id, [message])
    return SuccessResponse()


@router.post("/send-message", response_model=SuccessResponse)
async def send_message(
    req: SendMessageRequest,
    sender: MessageSender = Depends(get_message_sender),
) -> SuccessResponse:
    _missing(userId=req.user_id, message=req.message)

    await sender.push(req.user_id, [messages.relay_text_message(req.message)])
    return SuccessResponse()
