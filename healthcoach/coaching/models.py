"""Counseling profile, nutrition targets and API payloads — Pydantic v2 models.

Wire format is camelCase throughout; attributes are snake_case.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CounselingProfile(CamelModel):
    """Form values as submitted by the counseling wizard.

    Everything is kept as a string; the nutrition calculator does its own
    coercion and defaulting. Numbers sent by the client are stringified.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    name: str = ""
    age: str = ""
    gender: str = ""  # "male" | "female" (or 男性 / 女性 from the form)
    height: str = ""  # cm
    weight: str = ""  # kg
    target_weight: str = ""
    target_date: str = ""
    sleep_hours: str = ""
    activity_level: str = ""
    has_exercise_habit: str = ""
    exercise_frequency: str = ""
    meal_count: str = ""
    snack_frequency: str = ""
    drink_frequency: str = ""
    concerned_areas: str = ""
    goal_type: str = ""
    other_concerned_areas: str = ""
    other_goal_type: str = ""


class NutritionTargets(CamelModel):
    daily_calories: int
    protein: int  # g
    fat: int  # g
    carbs: int  # g
    bmi: float
    bmr: int  # kcal


class UserRecord(CamelModel):
    user_id: str
    is_registered: bool = False
    counseling_data: CounselingProfile | None = None
    nutrition_data: NutritionTargets | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ---------------------------------------------------------------------------
# Request / response payloads
# ---------------------------------------------------------------------------


class SubmitCounselingRequest(CamelModel):
    user_id: str | None = None
    counseling_data: CounselingProfile | None = None


class SubmitCounselingResponse(CamelModel):
    success: bool = True
    message: str = "Counseling data saved successfully"
    nutrition_data: NutritionTargets


class CounselingStatusResponse(CamelModel):
    is_registered: bool = False
    counseling_data: CounselingProfile | None = None
    nutrition_data: NutritionTargets | None = None


class AdviceRequest(CamelModel):
    user_id: str | None = None


class AdviceResponse(CamelModel):
    success: bool = True
    ai_advice: str
    nutrition_data: NutritionTargets


class SendAdviceRequest(CamelModel):
    user_id: str | None = None
    ai_advice: str | None = None
    nutrition_data: NutritionTargets | None = None


class SendMessageRequest(CamelModel):
    user_id: str | None = None
    message: str | None = None


class SuccessResponse(BaseModel):
    success: bool = True


def dump(model: BaseModel) -> dict[str, Any]:
    """JSON-ready camelCase dict, as stored and as sent on the wire."""
    return model.model_dump(mode="json", by_alias=True)
