"""Pulseboard application settings loaded from environment variables."""

from enum import StrEnum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    """Deployment environment."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class LogLevel(StrEnum):
    """Supported log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application-wide settings loaded from environment variables / .env file.

    These select which repository implementations back the services; they
    never change the service contracts themselves.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- GitHub Copilot usage source ---
    ENABLE_MOCK_API: bool = Field(
        default=True,
        description="Serve Copilot usage from the mock generator instead of GitHub.",
    )
    GITHUB_API_TOKEN: str = Field(
        default="",
        description="Bearer token for the GitHub REST API.",
    )
    GITHUB_API_URL: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API.",
    )
    GITHUB_API_VERSION: str = Field(
        default="2022-11-28",
        description="Value sent in the X-GitHub-Api-Version header.",
    )
    GITHUB_ORGANIZATION: str = Field(
        default="",
        description="Organization used when a request does not name one.",
    )
    GITHUB_DEFAULT_TEAM_SLUG: str = Field(
        default="",
        description="Team reported when a usage request does not name one.",
    )

    # --- Sample data ---
    SEED_SAMPLE_DATA: bool = Field(
        default=True,
        description="Seed sample metrics and a dashboard at startup.",
    )

    # --- Logging ---
    LOG_LEVEL: LogLevel = Field(
        default=LogLevel.INFO,
        description="Application log level.",
    )

    # --- Environment ---
    ENVIRONMENT: Environment = Field(
        default=Environment.DEV,
        description="Deployment environment (dev/staging/prod).",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.ENVIRONMENT == Environment.PROD

    @property
    def use_github_api(self) -> bool:
        """True when the real GitHub API should back Copilot usage."""
        return not self.ENABLE_MOCK_API and bool(self.GITHUB_API_TOKEN)


def get_settings() -> Settings:
    """Factory function for dependency injection via FastAPI Depends."""
    return Settings()
