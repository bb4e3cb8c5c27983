"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from winccoa_marketplace.utils import constants


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

    # GitHub API settings
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TOKEN: str | None = None
    DEFAULT_ORGANIZATION: str = constants.DEFAULT_ORGANIZATION

    # WinCC OA project settings
    DEFAULT_PROJECT_DIR: Path | None = None
    WINCCOA_VERSION: str = constants.DEFAULT_WINCCOA_VERSION

    # External executables
    GIT_EXECUTABLE: str = "git"
    NPM_EXECUTABLE: str = "npm"
    NPX_EXECUTABLE: str = "npx"


settings = Settings()
