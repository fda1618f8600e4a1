"""
Environment-backed settings for the Portfolio API.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True
    )

    app_name: str = "Portfolio API"
    log_level: str = "INFO"
    port: int = 5000

    # Database (MongoDB)
    mongo_uri: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("MONGO_URI", "atlas_URL")
    )
    database_name: str = "portfolio"

    # Auth
    jwt_secret: str = "super-secret-key-change"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # Seed admin
    admin_email: str = "admin@example.com"
    admin_password: str = "Admin@123"

    # Uploads
    upload_dir: str = "uploads"
    max_upload_bytes: int = 5 * 1024 * 1024

    cors_origins: List[str] = ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
