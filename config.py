# config.py
from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(..., description="SQLAlchemy connection string")

    host: str = "127.0.0.1"
    port: int = 3001

    session_cookie_name: str = "trackify_session"
    session_ttl_days: int = Field(default=7, ge=1)
    cookie_secure: bool = False

    cors_origins: List[str] = ["http://localhost:5500", "http://127.0.0.1:5500"]

    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    log_level: str = "INFO"
    log_json: bool = True


@lru_cache
def get_settings() -> Settings:
    return Settings()
