"""Prompt template for the advice generator."""

from __future__ import annotations

from healthcoach.coaching.models import CounselingProfile, NutritionTargets

ADVICE_PROMPT = """
あなたは健康管理の専門家です。以下のユーザー情報に基づいて、個別のアドバイスを提供してください。

【ユーザー情報】
- 名前: {p.name}
- 年齢: {p.age}歳
- 性別: {p.gender}
- 身長: {p.height}cm
- 現在の体重: {p.weight}kg
- 目標体重: {p.target_weight}kg
- 目標日: {p.target_date}
- BMI: {t.bmi}
- 目標: {goal}
- 気になる部位: {areas}
- 活動レベル: {p.activity_level}
- 運動習慣: {p.has_exercise_habit} ({p.exercise_frequency})
- 睡眠時間: {p.sleep_hours}
- 食事回数: {p.meal_count}
- 間食頻度: {p.snack_frequency}
- 飲酒頻度: {p.drink_frequency}

【計算された栄養目標】
- 基礎代謝: {t.bmr}kcal
- 1日カロリー: {t.daily_calories}kcal
- タンパク質: {t.protein}g
- 脂質: {t.fat}g
- 炭水化物: {t.carbs}g

以下の形式でアドバイスを提供してください：

1. 【総合評価】BMIと目標に対する現在の状況
2. 【食事アドバイス】具体的な食事の取り方
3. 【運動アドバイス】効果的な運動方法
4. 【生活習慣アドバイス】睡眠や生活リズムの改善点
5. 【目標達成のコツ】モチベーション維持の方法

各項目は3-4行程度で、実践的で具体的なアドバイスを提供してください。
"""


def _with_other(value: str, other: str) -> str:
    if other and other not in value:
        return f"{value} / {other}" if value else other
    return value


def build_advice_prompt(profile: CounselingProfile, targets: NutritionTargets) -> str:
    """Deterministic prompt text for a stored profile and its targets."""
    return ADVICE_PROMPT.format(
        p=profile,
        t=targets,
        goal=_with_other(profile.goal_type, profile.other_goal_type),
        areas=_with_other(profile.concerned_areas, profile.other_concerned_areas),
    ).strip()
