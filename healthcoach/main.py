import logging

from fastapi import FastAPI

from healthcoach.coaching.router import router as counseling_router
from healthcoach.config import settings
from healthcoach.errors import register_error_handlers
from healthcoach.line.webhook import router as webhook_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="HealthCoach", version="0.1.0")
app.include_router(webhook_router)
app.include_router(counseling_router)
register_error_handlers(app)


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "webhook": "/webhook",
        "api": {
            "submit_counseling": "/api/submit-counseling",
            "ai_advice": "/api/ai-advice",
            "send_ai_advice": "/api/send-ai-advice",
            "send_message": "/api/send-message",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
