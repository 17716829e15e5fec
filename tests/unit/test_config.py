# SPDX-FileCopyrightText: 2026 Andrew Grimberg <tykeal@bardicgrove.org>
# SPDX-License-Identifier: Apache-2.0
"""Unit tests for application configuration."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError
from src.config import Settings, get_settings


class TestSettings:
    """Tests for Settings configuration class."""

    def test_default_settings(self):
        """Test that default settings are applied."""
        settings = Settings(_env_file=None)

        # conftest sets DATABASE_URL and STANDALONE_MODE
        assert "sqlite" in settings.database_url
        assert settings.hold_ttl_hours == 72
        assert settings.min_stay_nights == 2
        assert settings.season_match_policy == "first"
        assert settings.tax_band_match_policy == "first"
        assert settings.default_currency == "EUR"
        assert settings.port == 8099
        assert settings.standalone_mode is True

    def test_hold_ttl_bounds(self):
        """Test hold TTL validation bounds."""
        assert Settings(_env_file=None, hold_ttl_hours=1).hold_ttl_hours == 1

        with pytest.raises(ValidationError):
            Settings(_env_file=None, hold_ttl_hours=0)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, hold_ttl_hours=721)

    def test_match_policy_choices(self):
        """Test that only known match policies are accepted."""
        settings = Settings(_env_file=None, season_match_policy="narrowest")
        assert settings.season_match_policy == "narrowest"

        with pytest.raises(ValidationError):
            Settings(_env_file=None, tax_band_match_policy="random")

    def test_environment_override(self):
        """Test environment variables override defaults."""
        with patch.dict(
            os.environ,
            {"HOLD_TTL_HOURS": "24", "MAIL_ENDPOINT_URL": "https://mail.example.com"},
        ):
            settings = Settings(_env_file=None)
            assert settings.hold_ttl_hours == 24
            assert settings.mail_endpoint_url == "https://mail.example.com"


class TestGetSettings:
    """Tests for get_settings function."""

    def test_returns_cached_instance(self):
        """Test that settings are cached."""
        assert get_settings() is get_settings()
