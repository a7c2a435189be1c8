"""
Application settings for the HTTP shell, backed by environment variables.

The projection engine never reads these; the API layer resolves defaults from
``settings`` and passes them into the core explicitly.
"""
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration schema; every field can be overridden from the environment or ``.env``."""

    APP_NAME: str = "investsim"
    VERSION: str = "0.1.0"
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # Defaults the admin panel would normally provide
    DEFAULT_DEPOSIT_RATE: float = 0.18
    DEFAULT_APPRECIATION_PERCENT: float = 6.0
    DEFAULT_RENT_INFLATION_RATE: float = 0.05
    DEFAULT_LOCALE: str = "ru"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
