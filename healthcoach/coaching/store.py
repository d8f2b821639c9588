"""Counseling store — one document per LINE user in ``coaching_users``.

Row shape: user_id, is_registered, counseling_data (JSONB), nutrition_data (JSONB),
created_at, updated_at. ``save`` computes the nutrition targets and writes them
together with the profile in a single upsert, so targets never exist without the
profile they were derived from.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Protocol

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from healthcoach.coaching.models import CounselingProfile, NutritionTargets, UserRecord, dump
from healthcoach.coaching.nutrition import calculate_nutrition


class CounselingStore(Protocol):
    async def get(self, user_id: str) -> UserRecord | None: ...

    async def save(self, user_id: str, profile: CounselingProfile) -> NutritionTargets: ...


_UPSERT = (
    "INSERT INTO coaching_users "
    "(user_id, is_registered, counseling_data, nutrition_data, created_at, updated_at) "
    "VALUES (:user_id, TRUE, CAST(:counseling_data AS JSONB), CAST(:nutrition_data AS JSONB), :now, :now) "
    "ON CONFLICT (user_id) DO UPDATE SET "
    "is_registered = TRUE, "
    "counseling_data = EXCLUDED.counseling_data, "
    "nutrition_data = EXCLUDED.nutrition_data, "
    "updated_at = EXCLUDED.updated_at"
)

_SELECT = (
    "SELECT user_id, is_registered, counseling_data, nutrition_data, created_at, updated_at "
    "FROM coaching_users WHERE user_id = :user_id"
)


def _as_dict(value: Any) -> dict[str, Any] | None:
    # asyncpg hands JSONB back as text unless a codec is registered
    if value is None:
        return None
    if isinstance(value, str):
        return json.loads(value)
    return dict(value)


class SqlCounselingStore:
    def __init__(self, session: AsyncSession):
        self._session = session

    async def get(self, user_id: str) -> UserRecord | None:
        """Fetch a user's document. Returns None when the user has never submitted."""
        result = await self._session.execute(text(_SELECT), {"user_id": user_id})
        row = result.fetchone()
        if row is None:
            return None
        data = dict(zip(result.keys(), row))

        counseling = _as_dict(data["counseling_data"])
        nutrition = _as_dict(data["nutrition_data"])
        return UserRecord(
            user_id=data["user_id"],
            is_registered=bool(data["is_registered"]),
            counseling_data=CounselingProfile.model_validate(counseling) if counseling else None,
            nutrition_data=NutritionTargets.model_validate(nutrition) if nutrition else None,
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )

    async def save(self, user_id: str, profile: CounselingProfile) -> NutritionTargets:
        """Store the profile and its freshly computed targets, replacing any previous pair."""
        targets = calculate_nutrition(profile)
        params = {
            "user_id": user_id,
            "counseling_data": json.dumps(dump(profile), ensure_ascii=False),
            "nutrition_data": json.dumps(dump(targets)),
            "now": datetime.now(timezone.utc),
        }
        await self._session.execute(text(_UPSERT), params)
        await self._session.commit()
        return targets
