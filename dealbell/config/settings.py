"""
Application settings and configuration.
All secrets are loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Slack Configuration
    slack_token: str
    slack_api_base_url: str = "https://slack.com/api/"
    http_timeout_seconds: float = 10.0

    # Well-known channels
    closed_won_channel_name: str = "closed-won"
    processed_messages_channel_name: str = "bot-processed"

    # Message windows
    source_message_limit: int = 10
    ledger_scan_limit: int = 100

    # Username the CRM integration posts under in production
    crm_bot_username: str = "HubSpot"

    # Application Settings
    environment: str = "development"
    debug: bool = False
    poll_interval_seconds: int = 0  # 0 disables the polling job
    run_on_startup: Optional[bool] = None  # Defaults to True in development

    @field_validator("slack_token")
    @classmethod
    def _token_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("SLACK_TOKEN is required and cannot be falsy.")
        return value.strip()

    @property
    def is_dev(self) -> bool:
        """Development mode only changes which messages qualify."""
        return self.environment.lower() == "development"

    @property
    def should_run_on_startup(self) -> bool:
        if self.run_on_startup is None:
            return self.is_dev
        return self.run_on_startup

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
