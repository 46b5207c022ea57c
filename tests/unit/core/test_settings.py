"""
Tests for app/shared/core/config.py - Configuration management
"""
import pytest
from unittest.mock import patch
from pydantic import ValidationError

from app.shared.core.config import Settings, get_settings, reload_settings_from_environment


class TestSettingsValidation:
    def test_defaults(self):
        with patch.dict("os.environ", {}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.APP_NAME == "AutomateROI"
        assert settings.LEADS_FILE_PATH == "data/leads.jsonl"
        assert settings.LEADS_RATE_LIMIT == "30/minute"
        assert settings.is_production_like is False

    def test_testing_forbidden_in_production(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValidationError, match="TESTING must be false"):
                Settings(ENVIRONMENT="production", TESTING=True, _env_file=None)

    def test_unknown_environment_rejected(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValidationError, match="ENVIRONMENT must be one of"):
                Settings(ENVIRONMENT="qa", _env_file=None)

    def test_production_requires_shared_rate_limit_storage(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValidationError, match="Distributed rate limiting"):
                Settings(ENVIRONMENT="production", _env_file=None)

            settings = Settings(
                ENVIRONMENT="production",
                REDIS_URL="redis://cache:6379/0",
                _env_file=None,
            )
            assert settings.is_production_like

            assert Settings(
                ENVIRONMENT="staging", RATELIMIT_ENABLED=False, _env_file=None
            ).is_production_like

    def test_empty_leads_path_rejected(self):
        with patch.dict("os.environ", {}, clear=True):
            with pytest.raises(ValidationError, match="LEADS_FILE_PATH"):
                Settings(LEADS_FILE_PATH="  ", _env_file=None)

    def test_reload_picks_up_environment(self, monkeypatch):
        monkeypatch.setenv("LEADS_RATE_LIMIT", "5/minute")
        try:
            assert reload_settings_from_environment().LEADS_RATE_LIMIT == "5/minute"
        finally:
            monkeypatch.delenv("LEADS_RATE_LIMIT")
            get_settings.cache_clear()
