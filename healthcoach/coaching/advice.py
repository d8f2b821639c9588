"""Advice generator — Gemini text completion over the counseling prompt."""

from __future__ import annotations

import logging
from typing import Protocol

from google import genai

from healthcoach.coaching.models import CounselingProfile, NutritionTargets
from healthcoach.coaching.prompts import build_advice_prompt
from healthcoach.errors import AdviceGenerationError

logger = logging.getLogger(__name__)


class AdviceGenerator(Protocol):
    async def generate(self, profile: CounselingProfile, targets: NutritionTargets) -> str: ...


class GeminiAdviceGenerator:
    def __init__(self, api_key: str, model: str, client: genai.Client | None = None):
        self._model = model
        self._api_key = api_key
        self._client = client

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self._api_key:
                raise AdviceGenerationError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def generate(self, profile: CounselingProfile, targets: NutritionTargets) -> str:
        """One generate_content call; any failure or empty reply raises AdviceGenerationError."""
        prompt = build_advice_prompt(profile, targets)
        client = self._get_client()
        try:
            response = await client.aio.models.generate_content(model=self._model, contents=prompt)
        except Exception as exc:
            raise AdviceGenerationError(f"Gemini request failed: {exc}") from exc

        advice = (response.text or "").strip()
        if not advice:
            raise AdviceGenerationError("Gemini returned an empty response")
        logger.info("Generated advice (%d chars) with %s", len(advice), self._model)
        return advice
