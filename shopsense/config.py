from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

# Shorter values are placeholders left in .env templates, not real keys.
MIN_API_KEY_LENGTH = 10


class Settings(BaseSettings):
    business_name: str = "Pink Chicken Speed Shop"
    labor_rate: int = 80

    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o"
    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    llm_timeout_seconds: float = 30.0

    openphone_api_key: Optional[str] = None
    openphone_phone_number: Optional[str] = None
    openphone_api_url: str = "https://api.openphone.com/v1"
    sms_timeout_seconds: float = 10.0

    dnd_enabled: bool = False
    # Ceiling on inline webhook processing so OpenPhone gets its ack before retrying.
    webhook_processing_timeout_seconds: float = 25.0
    database_url: Optional[str] = None
    cors_allow_origins: str = "*"
    log_level: str = "INFO"

    alert_bot_token: Optional[str] = None
    alert_chat_id: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def openai_configured(self) -> bool:
        return _is_key_configured(self.openai_api_key)

    @property
    def openphone_configured(self) -> bool:
        return _is_key_configured(self.openphone_api_key) and bool(self.openphone_phone_number)

    @property
    def cors_origins(self) -> list[str]:
        origins = [origin.strip() for origin in self.cors_allow_origins.split(",") if origin.strip()]
        return origins or ["*"]


def _is_key_configured(value: Optional[str]) -> bool:
    return bool(value) and len(value.strip()) >= MIN_API_KEY_LENGTH


def mask_secret(value: Optional[str]) -> Optional[str]:
    """Return a dashboard-safe preview that only shows the last four characters."""
    if not value:
        return None
    return f"••••••••{value[-4:]}"


@lru_cache
def get_settings() -> Settings:
    return Settings()
