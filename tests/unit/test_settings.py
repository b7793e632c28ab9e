"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError

from config.settings import Settings, get_settings


class TestSettings:

    def test_dashboard_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.dashboard_group_limit == 10
        assert settings.dashboard_ranked_limit == 10
        assert settings.dashboard_activity_limit == 5
        assert settings.dashboard_trend_months == 6

    def test_only_anon_key_is_configured(self):
        fields = set(Settings.model_fields)
        assert {"supabase_url", "supabase_key"} <= fields
        assert "supabase_service_key" not in fields

    def test_limits_are_validated(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, dashboard_activity_limit=0)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
