"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file).

    Built once at startup and handed down explicitly; nothing else in the
    application reads the environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # AI provider
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None
    ai_timeout_seconds: float = 60.0

    # GitHub
    github_token: SecretStr | None = None
    github_timeout_seconds: float = 30.0

    # Auth
    jwt_secret: SecretStr
    jwt_ttl_days: int = 7

    # Credential store (in-memory when unset)
    mongo_url: SecretStr | None = None
    mongo_database: str = "repo_forge"

    # Limits
    max_code_tokens: int = 12_000
    readme_file_chars: int = 2_500
    architecture_file_chars: int = 4_000
    explorer_file_chars: int = 200_000
    search_readme_chars: int = 2_000
    diagram_max_nodes: int = 400

    # Process
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the application settings (cached after first call)."""
    return Settings()  # type: ignore[call-arg]
