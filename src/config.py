# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Application configuration using Pydantic settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MatchPolicyName = Literal["first", "narrowest", "latest"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./data/stayledger.db",
        description="SQLAlchemy database URL",
    )

    # Reservation policy
    hold_ttl_hours: int = Field(
        default=72,
        ge=1,
        le=720,
        description="Lifetime of a public hold in hours",
    )
    season_match_policy: MatchPolicyName = Field(
        default="first",
        description="Tie-break when several seasons cover the same night",
    )
    tax_band_match_policy: MatchPolicyName = Field(
        default="first",
        description="Tie-break when several tourist-tax bands cover the same night",
    )
    min_stay_nights: int = Field(
        default=2,
        ge=1,
        description="Site-wide minimum stay for guest requests",
    )
    default_currency: str = Field(
        default="EUR",
        min_length=3,
        max_length=3,
        description="Currency used when a property does not define one",
    )

    # Mail relay
    mail_endpoint_url: str = Field(
        default="",
        description="URL of the mail relay endpoint (empty disables sending)",
    )
    mail_api_key: str = Field(
        default="",
        description="API key sent to the mail relay as X-Api-Key",
    )
    mail_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for mail relay requests",
    )
    owner_email: str = Field(
        default="",
        description="Recipient for new booking request notifications",
    )

    # Application mode
    standalone_mode: bool = Field(
        default=False,
        description="Expose interactive API docs",
    )

    # Server configuration
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=8099,
        description="Server port",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Application settings instance.
    """
    return Settings()
