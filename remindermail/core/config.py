from enum import Enum
from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ReminderSettings(BaseSettings):
    """Runtime configuration for one notifier run.

    Built once by the entry point and handed to the pipeline; nothing reads
    settings from module globals.
    """

    ENVIRONMENT: Environment = Environment.PRODUCTION

    # Reminder store (Supabase / PostgREST)
    STORE_URL: str
    STORE_KEY: str
    STORE_REST_PATH: str = "/rest/v1"
    STORE_TABLE: str = "reminders"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Email
    FROM_EMAIL: str
    SMTP_SERVER: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TIMEOUT_SECONDS: float = 30.0

    # Metrics
    METRICS_ENABLED: bool = False
    METRICS_PUSHGATEWAY_URL: Optional[str] = None
    METRICS_JOB_NAME: str = "reminder_notifier"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    @field_validator("STORE_URL", "METRICS_PUSHGATEWAY_URL")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().rstrip("/")
        return v or None

    @field_validator("STORE_REST_PATH")
    @classmethod
    def normalize_rest_path(cls, v: str) -> str:
        v = v.strip().strip("/")
        return f"/{v}" if v else ""

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @model_validator(mode="after")
    def validate_store_config(self) -> "ReminderSettings":
        if not self.STORE_URL:
            raise ValueError("STORE_URL is required")
        if not self.STORE_KEY.strip():
            raise ValueError("STORE_KEY is required")
        if self.is_production and self.STORE_URL.startswith("http://"):
            raise ValueError("STORE_URL must use HTTPS in production")
        return self

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION

    @property
    def store_endpoint(self) -> str:
        """Full URL of the reminders table endpoint."""
        return f"{self.STORE_URL}{self.STORE_REST_PATH}/{self.STORE_TABLE}"

    model_config = SettingsConfigDict(
        env_prefix="REMINDER_",
        case_sensitive=True,
        env_file=".env",
        extra="ignore",
    )


def load_settings(**overrides) -> ReminderSettings:
    """Build settings from the environment (and `.env`), applying overrides."""
    return ReminderSettings(**overrides)
