"""
Application settings.

Values come from environment variables and an optional `.env` file in the
working directory.
"""

from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Moveware Quote Portal"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: str = "http://localhost:3000"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Persistence
    DATABASE_URL: str = "sqlite:///./data/portal.db"

    # Moveware REST API
    MOVEWARE_API_BASE_URL: str = "https://rest.moveware-test.app"
    MOVEWARE_TIMEOUT_SECONDS: float = 30.0

    # Bot conversations
    SESSION_TIMEOUT_MINUTES: int = 30
    BOT_HISTORY_LIMIT: int = 50

    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
