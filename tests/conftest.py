"""Shared fixtures for the test suite."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from healthcoach.auth import compute_signature
from healthcoach.coaching.models import CounselingProfile, NutritionTargets, UserRecord
from healthcoach.coaching.nutrition import calculate_nutrition
from healthcoach.config import settings
from healthcoach.deps import get_advice_generator, get_message_sender, get_store
from healthcoach.errors import AdviceGenerationError, MessagingError
from healthcoach.main import app

CHANNEL_SECRET = "test-channel-secret"
APP_URL = "https://liff.example.test"


# ---------------------------------------------------------------------------
# In-memory collaborators (no Postgres, LINE or Gemini needed)
# ---------------------------------------------------------------------------

class InMemoryCounselingStore:
    def __init__(self):
        self.records: dict[str, UserRecord] = {}

    async def get(self, user_id: str) -> UserRecord | None:
        return self.records.get(user_id)

    async def save(self, user_id: str, profile: CounselingProfile) -> NutritionTargets:
        targets = calculate_nutrition(profile)
        now = datetime.now(timezone.utc)
        previous = self.records.get(user_id)
        self.records[user_id] = UserRecord(
            user_id=user_id,
            is_registered=True,
            counseling_data=profile,
            nutrition_data=targets,
            created_at=previous.created_at if previous else now,
            updated_at=now,
        )
        return targets


class FakeAdviceGenerator:
    def __init__(self, advice: str = "よく眠り、よく食べましょう。", fail: bool = False):
        self.advice = advice
        self.fail = fail
        self.calls: list[tuple[CounselingProfile, NutritionTargets]] = []

    async def generate(self, profile: CounselingProfile, targets: NutritionTargets) -> str:
        self.calls.append((profile, targets))
        if self.fail:
            raise AdviceGenerationError("boom")
        return self.advice


class FakeMessageSender:
    """Records outbound messages. Reply tokens listed in ``failing_tokens`` raise."""

    def __init__(self, failing_tokens: set[str] | None = None, fail_push: bool = False):
        self.replies: list[tuple[str, list[dict[str, Any]]]] = []
        self.pushes: list[tuple[str, list[dict[str, Any]]]] = []
        self.failing_tokens = failing_tokens or set()
        self.fail_push = fail_push

    async def reply(self, reply_token: str, messages: list[dict[str, Any]]) -> None:
        if reply_token in self.failing_tokens:
            raise MessagingError(500, "reply failed")
        self.replies.append((reply_token, messages))

    async def push(self, user_id: str, messages: list[dict[str, Any]]) -> None:
        if self.fail_push:
            raise MessagingError(500, "push failed")
        self.pushes.append((user_id, messages))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def store():
    return InMemoryCounselingStore()


@pytest.fixture()
def advice_generator():
    return FakeAdviceGenerator()


@pytest.fixture()
def sender():
    return FakeMessageSender()


@pytest.fixture()
def line_settings(monkeypatch):
    monkeypatch.setattr(settings, "line_channel_secret", CHANNEL_SECRET)
    monkeypatch.setattr(settings, "liff_url", APP_URL)
    return settings


@pytest.fixture()
def override_deps(store, advice_generator, sender, line_settings):
    """Override the collaborator dependencies so nothing external is called."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_advice_generator] = lambda: advice_generator
    app.dependency_overrides[get_message_sender] = lambda: sender
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
async def client(override_deps):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_profile(**overrides: Any) -> dict[str, Any]:
    """Helper to build a counselingData payload as the form sends it."""
    data = {
        "name": "山田太郎",
        "age": "30",
        "gender": "男性",
        "height": "170",
        "weight": "65",
        "targetWeight": "60",
        "targetDate": "2026-12-31",
        "sleepHours": "6-7時間",
        "activityLevel": "中程度の活動",
        "hasExerciseHabit": "はい",
        "exerciseFrequency": "週2-3回",
        "mealCount": "3回",
        "snackFrequency": "時々",
        "drinkFrequency": "週1回",
        "concernedAreas": "お腹",
        "goalType": "weight_loss",
        "otherConcernedAreas": "",
        "otherGoalType": "",
    }
    data.update(overrides)
    return data


def signed(body: dict[str, Any] | bytes, secret: str = CHANNEL_SECRET) -> tuple[bytes, dict[str, str]]:
    """Serialise a webhook body and return it with a valid x-line-signature header."""
    raw = body if isinstance(body, bytes) else json.dumps(body, ensure_ascii=False).encode("utf-8")
    return raw, {"x-line-signature": compute_signature(secret, raw), "content-type": "application/json"}


def line_event(event_type: str, reply_token: str | None = "reply-token", **extra: Any) -> dict[str, Any]:
    """Helper to build a raw LINE webhook event."""
    event: dict[str, Any] = {
        "type": event_type,
        "mode": "active",
        "timestamp": 1760000000000,
        "source": {"type": "user", "userId": "U1234567890"},
    }
    if reply_token is not None:
        event["replyToken"] = reply_token
    event.update(extra)
    return event
