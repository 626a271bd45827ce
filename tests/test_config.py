"""Tests for configuration management and validation.

Validates GlobalConfig behavior including:
- Environment variable loading
- Pydantic validation rules
- Deployment-mode aliases
- Singleton cache behavior

Testing Philosophy:
    Configuration errors should fail-fast at startup, not during runtime.
"""

import pytest
from pydantic import ValidationError

from config.settings import GlobalConfig


class TestGlobalConfigValidation:
    """Test suite for GlobalConfig validation rules."""

    def test_default_values_are_sane(self, mock_config: GlobalConfig) -> None:
        """Verify defaults match the page template timings."""
        assert mock_config.headless is True
        assert mock_config.constrained_mode is False
        assert mock_config.equity_readiness_selectors == ["#cards-ticker", "#table-indicators"]
        assert mock_config.fund_readiness_selectors == ["#cards-ticker"]
        assert set(mock_config.blocked_resource_types) == {"image", "stylesheet", "font", "media"}
        assert len(mock_config.user_agents) >= 1

    def test_production_timeouts_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify navigation timeouts default to tens of seconds."""
        for key in (
            "EQUITY_NAVIGATION_TIMEOUT_MS",
            "FUND_NAVIGATION_TIMEOUT_MS",
            "EQUITY_READINESS_TIMEOUT_MS",
            "FUND_READINESS_TIMEOUT_MS",
        ):
            monkeypatch.delenv(key, raising=False)

        config = GlobalConfig(_env_file=None)

        assert config.equity_navigation_timeout_ms == 60000
        assert config.fund_navigation_timeout_ms == 45000
        assert config.equity_readiness_timeout_ms == 30000
        assert config.fund_readiness_timeout_ms == 20000

    def test_render_flag_enables_constrained_mode(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify the hosting platform's RENDER flag maps to constrained mode."""
        monkeypatch.delenv("CONSTRAINED_MODE", raising=False)
        monkeypatch.setenv("RENDER", "true")

        config = GlobalConfig(_env_file=None)

        assert config.constrained_mode is True

    def test_constrained_mode_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify the explicit flag is read too."""
        monkeypatch.delenv("RENDER", raising=False)
        monkeypatch.setenv("CONSTRAINED_MODE", "1")

        assert GlobalConfig(_env_file=None).constrained_mode is True

    def test_base_url_trailing_slash_added(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify base_url is normalized for URL templating."""
        monkeypatch.setenv("BASE_URL", "https://example.com")

        assert GlobalConfig(_env_file=None).base_url == "https://example.com/"

    def test_invalid_port_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify out-of-range ports fail validation."""
        monkeypatch.setenv("PORT", "70000")

        with pytest.raises(ValidationError):
            GlobalConfig(_env_file=None)

    def test_invalid_log_level_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify unknown log levels fail validation."""
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

        with pytest.raises(ValidationError):
            GlobalConfig(_env_file=None)

    def test_missing_ratio_bounds(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify the coverage warning ratio must be a fraction."""
        monkeypatch.setenv("MISSING_FIELD_WARNING_RATIO", "1.5")

        with pytest.raises(ValidationError):
            GlobalConfig(_env_file=None)

    def test_list_fields_parse_json(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Verify list settings are read as JSON arrays."""
        monkeypatch.setenv("FUND_READINESS_SELECTORS", '["#cards-ticker", ".desc"]')

        assert GlobalConfig(_env_file=None).fund_readiness_selectors == ["#cards-ticker", ".desc"]


class TestConfigSingleton:
    """Test suite for the cached accessor."""

    def test_get_config_returns_cached_instance(self, mock_config: GlobalConfig) -> None:
        from config.settings import get_config

        assert get_config() is mock_config
        assert get_config() is get_config()

    def test_cache_clear_reloads_environment(
        self, mock_config: GlobalConfig, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from config.settings import get_config

        get_config.cache_clear()
        monkeypatch.setenv("APP_NAME", "Reloaded")

        assert get_config().app_name == "Reloaded"
