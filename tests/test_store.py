"""Tests for the SQL counseling store — fake session, no Postgres."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import pytest

from healthcoach.coaching.models import CounselingProfile
from healthcoach.coaching.store import SqlCounselingStore
from healthcoach.db import async_database_url
from tests.conftest import make_profile


class FakeResult:
    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._keys = list(rows[0].keys()) if rows else []

    def keys(self):
        return self._keys

    def fetchone(self):
        if not self._rows:
            return None
        return tuple(self._rows[0][k] for k in self._keys)


class FakeSession:
    """Records statements; answers SELECTs with the configured rows."""

    def __init__(self, rows: list[dict[str, Any]] | None = None):
        self._rows = rows or []
        self.executed: list[tuple[str, dict[str, Any]]] = []
        self.commits = 0

    async def execute(self, stmt, params=None):
        self.executed.append((str(stmt), params or {}))
        return FakeResult(self._rows)

    async def commit(self):
        self.commits += 1


def _row(counseling: Any, nutrition: Any) -> dict[str, Any]:
    ts = datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc)
    return {
        "user_id": "U1",
        "is_registered": True,
        "counseling_data": counseling,
        "nutrition_data": nutrition,
        "created_at": ts,
        "updated_at": ts,
    }


NUTRITION = {"dailyCalories": 2487, "protein": 124, "fat": 69, "carbs": 342, "bmi": 22.5, "bmr": 1605}


class TestSave:
    @pytest.mark.asyncio
    async def test_single_upsert_with_profile_and_targets(self):
        session = FakeSession()
        profile = CounselingProfile.model_validate(make_profile())

        targets = await SqlCounselingStore(session).save("U1", profile)

        assert targets.daily_calories == 2487
        assert len(session.executed) == 1
        sql, params = session.executed[0]
        assert "ON CONFLICT (user_id) DO UPDATE" in sql
        assert params["user_id"] == "U1"
        assert json.loads(params["counseling_data"]) == make_profile()
        assert json.loads(params["nutrition_data"]) == NUTRITION
        assert session.commits == 1


class TestGet:
    @pytest.mark.asyncio
    async def test_missing_user_returns_none(self):
        assert await SqlCounselingStore(FakeSession()).get("nobody") is None

    @pytest.mark.asyncio
    async def test_decoded_jsonb(self):
        session = FakeSession([_row(make_profile(), NUTRITION)])
        record = await SqlCounselingStore(session).get("U1")

        assert record is not None
        assert record.is_registered is True
        assert record.counseling_data.name == "山田太郎"
        assert record.nutrition_data.bmi == 22.5
        assert session.executed[0][1] == {"user_id": "U1"}

    @pytest.mark.asyncio
    async def test_jsonb_as_text(self):
        session = FakeSession([_row(json.dumps(make_profile()), json.dumps(NUTRITION))])
        record = await SqlCounselingStore(session).get("U1")

        assert record.counseling_data.activity_level == "中程度の活動"
        assert record.nutrition_data.daily_calories == 2487

    @pytest.mark.asyncio
    async def test_null_documents(self):
        session = FakeSession([_row(None, None)])
        record = await SqlCounselingStore(session).get("U1")

        assert record.counseling_data is None
        assert record.nutrition_data is None


class TestDatabaseUrl:
    def test_sync_schemes_use_asyncpg(self):
        assert async_database_url("postgres://u:p@db:5432/hc") == "postgresql+asyncpg://u:p@db:5432/hc"
        assert async_database_url("postgresql://db/hc") == "postgresql+asyncpg://db/hc"
        assert async_database_url("postgresql+psycopg2://db/hc") == "postgresql+asyncpg://db/hc"

    def test_async_url_untouched(self):
        assert async_database_url("postgresql+asyncpg://db/hc") == "postgresql+asyncpg://db/hc"
