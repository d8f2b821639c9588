"""Dependency providers for the external collaborators.

Tests swap these out through ``app.dependency_overrides``.
"""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from healthcoach.coaching.advice import AdviceGenerator, GeminiAdviceGenerator
from healthcoach.coaching.store import CounselingStore, SqlCounselingStore
from healthcoach.config import settings
from healthcoach.db import get_session
from healthcoach.line.client import LineMessagingClient, MessageSender


async def get_store(session: AsyncSession = Depends(get_session)) -> CounselingStore:
    return SqlCounselingStore(session)


async def get_advice_generator() -> AdviceGenerator:
    return GeminiAdviceGenerator(api_key=settings.gemini_api_key, model=settings.gemini_model)


async def get_message_sender() -> MessageSender:
    return LineMessagingClient(
        access_token=settings.line_channel_access_token,
        base_url=settings.line_api_base_url,
    )
