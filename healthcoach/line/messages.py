"""Outbound LINE message templates — payload dicts only, no I/O."""

from __future__ import annotations

from typing import Any

from healthcoach.coaching.models import NutritionTargets

BRAND_COLOR = "#1DB446"
MUTED_COLOR = "#666666"

START_COUNSELING_DATA = "action=start_counseling"

Message = dict[str, Any]


def text_message(text: str) -> Message:
    return {"type": "text", "text": text}


def _text(text: str, **style: Any) -> dict[str, Any]:
    return {"type": "text", "text": text, **style}


def _title(text: str, size: str = "xl") -> dict[str, Any]:
    return _text(text, weight="bold", size=size, color=BRAND_COLOR)


def _button(label: str, action: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": "box",
        "layout": "vertical",
        "contents": [
            {
                "type": "button",
                "style": "primary",
                "color": BRAND_COLOR,
                "action": {"label": label, **action},
            }
        ],
    }


def _uri_button(label: str, uri: str) -> dict[str, Any]:
    return _button(label, {"type": "uri", "uri": uri})


def _bubble(alt_text: str, body: list[dict[str, Any]], footer: dict[str, Any], header: list | None = None) -> Message:
    bubble: dict[str, Any] = {
        "type": "bubble",
        "body": {"type": "box", "layout": "vertical", "contents": body},
        "footer": footer,
    }
    if header:
        bubble["header"] = {"type": "box", "layout": "vertical", "contents": header}
    return {"type": "flex", "altText": alt_text, "contents": bubble}


def welcome_message() -> Message:
    return _bubble(
        "カウンセリングを開始しましょう！",
        [
            _title("こんにちは！"),
            _text("Kota-kun健康管理アプリへようこそ！", wrap=True, margin="md"),
            _text(
                "まずは簡単なカウンセリングを行って、あなたに最適な健康プランを作成しましょう。",
                wrap=True,
                margin="md",
                size="sm",
                color=MUTED_COLOR,
            ),
        ],
        _button("カウンセリングを開始", {"type": "postback", "data": START_COUNSELING_DATA}),
    )


def open_app_message(app_url: str) -> Message:
    return _bubble(
        "LIFFアプリを開く",
        [
            _title("Kota-kun LIFF App"),
            _text("健康管理アプリを開いてみましょう！", wrap=True, margin="md"),
        ],
        _uri_button("アプリを開く", app_url),
    )


def start_counseling_message(app_url: str) -> Message:
    return _bubble(
        "カウンセリングページを開く",
        [
            _title("カウンセリングを開始します"),
            _text("以下のボタンを押してカウンセリングページを開いてください。", wrap=True, margin="md"),
        ],
        _uri_button("カウンセリングページを開く", f"{app_url}/counseling"),
    )


def mypage_url(app_url: str) -> str:
    return f"{app_url}?mode=mypage"


def mypage_message(app_url: str) -> Message:
    return _bubble(
        "マイページを開く",
        [_title("マイページ"), _text("栄養目標とアドバイスを確認できます。", wrap=True, margin="md")],
        _uri_button("マイページを開く", mypage_url(app_url)),
    )


def image_ack_message() -> Message:
    return text_message("画像を受け取りました！画像の解析機能は準備中です。もうしばらくお待ちください。")


def postback_echo_message(data: str) -> Message:
    return text_message(f"ポストバックを受信しました: {data}")


def relay_text_message(message: str) -> Message:
    return text_message(f"LIFFアプリから: {message}")


def _nutrition_row(label: str, value: str) -> dict[str, Any]:
    return {
        "type": "box",
        "layout": "baseline",
        "contents": [
            _text(label, size="sm", color=MUTED_COLOR, flex=0),
            _text(value, size="sm", color=BRAND_COLOR, weight="bold", align="end"),
        ],
    }


def advice_message(advice: str, targets: NutritionTargets, app_url: str) -> Message:
    """Flex bubble with the nutrition table, the generated advice and a my-page button."""
    rows = [
        _nutrition_row("カロリー", f"{targets.daily_calories}kcal"),
        _nutrition_row("タンパク質", f"{targets.protein}g"),
        _nutrition_row("脂質", f"{targets.fat}g"),
        _nutrition_row("炭水化物", f"{targets.carbs}g"),
    ]
    return _bubble(
        "AIアドバイス",
        [
            _text("あなたに最適な健康プランが完成しました！", wrap=True, margin="md", color=MUTED_COLOR),
            {"type": "separator", "margin": "md"},
            _text("【栄養目標】", weight="bold", margin="md"),
            {"type": "box", "layout": "vertical", "margin": "sm", "contents": rows},
            {"type": "separator", "margin": "md"},
            _text("【AIアドバイス】", weight="bold", margin="md"),
            _text(advice, wrap=True, margin="sm", size="sm", color=MUTED_COLOR),
        ],
        _uri_button("マイページを開く", mypage_url(app_url)),
        header=[_title("🤖 AI健康アドバイス", size="lg")],
    )
