from pathlib import Path
import os
from datetime import tzinfo
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # repo root

ENV_FILE = os.getenv("ENV_FILE", str(BASE_DIR / ".env"))

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILE, extra="ignore")

    APP_ENV: str = "local"
    DATABASE_URL: str
    CORS_ORIGINS: str = "*"  # Comma-separated list of allowed origins, or "*" for all
    LOG_LEVEL: str = "INFO"

    # IANA zone used for "today" and per-day buckets; empty means host local time
    ANALYTICS_TIMEZONE: str = ""

    # Origin the public form pages are served from (used in share snippets)
    PUBLIC_BASE_URL: str = "http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list, handling '*' for development"""
        if self.CORS_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def analytics_tz(self) -> tzinfo | None:
        if not self.ANALYTICS_TIMEZONE:
            return None
        return ZoneInfo(self.ANALYTICS_TIMEZONE)

settings = Settings()
