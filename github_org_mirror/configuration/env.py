"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # Account and credential settings
    GIT_USER: str | None = None
    GITHUB_API_KEY: str | None = None

    # Mirror target settings
    GITHUB_API_URL: str | None = None
    GITHUB_ORG: str | None = None
    REPO_DIR: str | None = None

    # Time budgets (seconds)
    RUN_TIMEOUT: float | None = None
    REPOSITORY_TIMEOUT: float | None = None
    LISTING_TIMEOUT: float | None = None

    # Listing retry policy
    MAX_LISTING_RETRIES: int | None = None
