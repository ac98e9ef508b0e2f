"""
Application configuration using Pydantic Settings.

Automatically loads environment variables from .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite:///./documents.db"

    # Upload storage
    upload_dir: Path = Path("uploads")
    max_documents_per_user: int = 10

    # Remote language model
    llm_api_key: str | None = None
    # OpenAI-compatible endpoint that serves the default model
    llm_base_url: str | None = "https://api.anthropic.com/v1/"
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 4096

    # Authentication
    jwt_secret: str = "CHANGE_ME_FOR_PROD"
    jwt_issuer: str = "project-document-analyzer"
    access_token_ttl_seconds: int = 7 * 24 * 60 * 60
    bcrypt_rounds: int = 12

    # Frontend origins allowed by CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Debug flags
    sql_debug: bool = False
    debug: bool = False

    model_config = SettingsConfigDict(
        # Load from .env file next to the package
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        # Case insensitive environment variable names
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration loaded from environment.
    """
    return Settings()
