"""Nutrition targets from a counseling profile — pure math, never raises.

Harris-Benedict BMR × activity factor, split 20/25/55 into protein/fat/carbs.
Form values arrive as free strings; anything missing or unparseable falls back
to a default so the calculation is total.
"""

from __future__ import annotations

import math
import re

from healthcoach.coaching.models import CounselingProfile, NutritionTargets

DEFAULT_AGE = 25
DEFAULT_HEIGHT_CM = 170
DEFAULT_WEIGHT_KG = 65.0

KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_FAT = 9
KCAL_PER_G_CARBS = 4

PROTEIN_RATIO = 0.20
FAT_RATIO = 0.25
CARBS_RATIO = 0.55

ACTIVITY_FACTORS: dict[str, float] = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "active": 1.725,
    "very active": 1.9,
}
DEFAULT_ACTIVITY = "moderate"

# Labels the LIFF form actually sends
_ACTIVITY_ALIASES: dict[str, str] = {
    "座りがち": "sedentary",
    "軽い活動": "light",
    "中程度の活動": "moderate",
    "活発": "active",
    "非常に活発": "very active",
    "lightly active": "light",
    "moderately active": "moderate",
}

_MALE_VALUES = {"male", "m", "man", "男性", "男"}

# Leading number, as the form's parseInt / parseFloat read it. Digit runs are capped so
# absurd inputs fall outside the plausible ranges below instead of overflowing.
_INT_PREFIX = re.compile(r"^\s*[+-]?\d{1,6}")
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d{1,6}(?:\.\d{0,6})?|\.\d{1,6})(?:[eE][+-]?\d{1,3})?")

# Exclusive upper bounds; anything outside (0, bound) is treated as unparseable
MAX_AGE = 150
MAX_HEIGHT_CM = 300
MAX_WEIGHT_KG = 1000.0


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves away from the floor (2.5 -> 3), unlike built-in round()."""
    scale = 10**ndigits
    return math.floor(value * scale + 0.5) / scale


def parse_int(raw: str | None, default: int, upper: int) -> int:
    """Leading integer of ``raw`` ("30.7" -> 30). Missing or outside (0, upper) -> default."""
    if not raw:
        return default
    match = _INT_PREFIX.match(raw)
    if match is None:
        return default
    value = int(match.group())
    return value if 0 < value < upper else default


def parse_float(raw: str | None, default: float, upper: float) -> float:
    """Leading number of ``raw`` ("72.5kg" -> 72.5). Missing or outside (0, upper) -> default."""
    if not raw:
        return default
    match = _FLOAT_PREFIX.match(raw)
    if match is None:
        return default
    value = float(match.group())
    if not 0 < value < upper:
        return default
    return value


def is_male(gender: str | None) -> bool:
    return (gender or "").strip().lower() in _MALE_VALUES


def activity_bucket(level: str | None) -> str:
    """Normalise an activity label to one of ACTIVITY_FACTORS' keys."""
    key = (level or "").strip().lower().replace("_", " ").replace("-", " ")
    key = " ".join(key.split())
    if key in ACTIVITY_FACTORS:
        return key
    return _ACTIVITY_ALIASES.get(key, DEFAULT_ACTIVITY)


def activity_factor(level: str | None) -> float:
    return ACTIVITY_FACTORS[activity_bucket(level)]


def harris_benedict_bmr(weight: float, height: float, age: int, male: bool) -> float:
    if male:
        return 88.362 + (13.397 * weight) + (4.799 * height) - (5.677 * age)
    return 447.593 + (9.247 * weight) + (3.098 * height) - (4.330 * age)


def bmi(weight: float, height_cm: float) -> float:
    meters = height_cm / 100
    return round_half_up(weight / (meters * meters), 1)


def calculate_nutrition(profile: CounselingProfile) -> NutritionTargets:
    """Daily calorie and macro targets for a profile."""
    age = parse_int(profile.age, DEFAULT_AGE, MAX_AGE)
    height = parse_int(profile.height, DEFAULT_HEIGHT_CM, MAX_HEIGHT_CM)
    weight = parse_float(profile.weight, DEFAULT_WEIGHT_KG, MAX_WEIGHT_KG)

    raw_bmr = harris_benedict_bmr(weight, height, age, is_male(profile.gender))
    daily_calories = int(round_half_up(raw_bmr * activity_factor(profile.activity_level)))

    return NutritionTargets(
        daily_calories=daily_calories,
        protein=int(round_half_up(daily_calories * PROTEIN_RATIO / KCAL_PER_G_PROTEIN)),
        fat=int(round_half_up(daily_calories * FAT_RATIO / KCAL_PER_G_FAT)),
        carbs=int(round_half_up(daily_calories * CARBS_RATIO / KCAL_PER_G_CARBS)),
        bmi=bmi(weight, height),
        bmr=int(round_half_up(raw_bmr)),
    )
