from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/healthcoach"
    log_level: str = "INFO"

    # LINE Messaging API (channel credentials from the LINE developers console)
    line_channel_access_token: str = ""
    line_channel_secret: str = ""
    line_api_base_url: str = "https://api.line.me"

    # Gemini advice generation
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # LIFF front-end. liff_url wins; otherwise derived from liff_id.
    liff_url: str | None = None
    liff_id: str | None = None

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def app_url(self) -> str:
        if self.liff_url:
            return self.liff_url.rstrip("/")
        if self.liff_id:
            return f"https://liff.line.me/{self.liff_id}"
        return "https://liff.line.me"


settings = Settings()
