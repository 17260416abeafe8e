# backend/app/core/config.py
import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import BRAND_NAME


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path} (exists={env_path.exists()})")
    load_dotenv(env_path)


SessionReviewTrigger = Literal["on_completion", "manual"]


class Settings(BaseSettings):
    # JWT verification for the identity context; tokens are issued elsewhere
    secret_key: SecretStr = Field(
        default=SecretStr("dev-secret-key-change-me"),
        description="Secret key used to verify JWT bearer tokens",
    )
    algorithm: str = "HS256"

    database_url: str = Field(
        default="sqlite:///./coachconnect.db",
        alias="DATABASE_URL",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # Email
    email_provider: Literal["console", "resend"] = Field(
        default="console",
        alias="EMAIL_PROVIDER",
        description="Email provider name",
    )
    resend_api_key: str | None = Field(
        default=None,
        alias="RESEND_API_KEY",
        description="API key for Resend provider (optional)",
    )
    from_email: str = Field(
        default=f"{BRAND_NAME} <hello@coachconnect.app>",
        alias="FROM_EMAIL",
    )
    frontend_url: str = Field(default="http://localhost:3000", alias="FRONTEND_URL")

    # Reviews
    review_invite_ttl_days: int = Field(
        default=90,
        alias="REVIEW_INVITE_TTL_DAYS",
        description="Days a review invite stays redeemable",
    )
    review_cooldown_days: int = Field(
        default=270,
        alias="REVIEW_COOLDOWN_DAYS",
        description="Minimum days between direct reviews of the same coach by one ensemble",
    )
    session_review_trigger: SessionReviewTrigger = Field(
        default="on_completion",
        alias="SESSION_REVIEW_TRIGGER",
        description="When a coach's session-review obligation is opened",
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("review_invite_ttl_days", "review_cooldown_days")
    @classmethod
    def _positive_days(cls, value: int) -> int:
        if value < 0:
            raise ValueError("day counts must not be negative")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
