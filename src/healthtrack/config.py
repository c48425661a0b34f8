from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./healthtrack.db"
    user_id: int = 1  # single-user MVP; multi-user: swap for JWT claim
    default_username: str = "default"

    # Client side: REST API with local JSON fallback
    api_base_url: str = "http://localhost:8000"
    api_timeout_seconds: float = 5.0
    local_store_path: Path = Path.home() / ".healthtrack" / "data.json"

    telegram_bot_token: str = ""
    telegram_allowed_user_id: Optional[int] = None
    reminder_timezone: str = "UTC"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "HEALTHTRACK_"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
