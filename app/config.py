from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_EXPIRY_WINDOW_DAYS = 7


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Application
    APP_NAME: str = "Inventory Manager"
    APP_VERSION: str = "1.0.0"
    CORS_ORIGINS: list[str] = ["*"]

    # Database
    DATABASE_URL: str = "sqlite:///./inventory.db"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Inventory rules
    EXPIRY_WINDOW_DAYS: int = DEFAULT_EXPIRY_WINDOW_DAYS


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()
