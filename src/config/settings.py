"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration — all values from .env or environment."""

    TELEGRAM_BOT_TOKEN: str
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/camping.db"
    LOG_LEVEL: str = "INFO"
    CATALOG_PATH: str = ""  # empty means the catalog bundled with the package

    MAX_PEOPLE: int = 30
    MAX_DAYS: int = 14
    MAX_TRIPS_PER_USER: int = 10

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
