"""Tests for configuration system."""

import pytest
from pydantic import ValidationError

from tracker.config import DEFAULT_SCANNER_SYMBOLS, Settings, load_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(config_file="nonexistent.yaml")
        assert settings.storage_key == "stock-portfolio-data"
        assert settings.price_cache_ttl_seconds == 600.0
        assert settings.refresh_interval_seconds == 10.0
        assert settings.scanner_ma_period == 150
        assert settings.scanner_max_deviation_pct == 5.0
        assert settings.scanner_min_market_cap == 1e9
        assert settings.http_timeout_seconds is None
        assert settings.log_level == "INFO"
        assert settings.dashboard_port == 8000

    def test_default_scanner_symbols(self):
        settings = Settings(config_file="nonexistent.yaml")
        assert settings.scanner_symbols == DEFAULT_SCANNER_SYMBOLS
        assert "AAPL" in settings.scanner_symbols

    def test_scanner_symbols_normalized(self):
        settings = Settings(
            scanner_symbols=[" aapl", "msft ", ""], config_file="nonexistent.yaml"
        )
        assert settings.scanner_symbols == ["AAPL", "MSFT"]

    def test_log_level_case_insensitive(self):
        settings = Settings(log_level="debug", config_file="nonexistent.yaml")
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose", config_file="nonexistent.yaml")

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(price_cache_ttl_seconds=0, config_file="nonexistent.yaml")

    def test_refresh_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(refresh_interval_seconds=-1, config_file="nonexistent.yaml")

    def test_port_range(self):
        with pytest.raises(ValidationError):
            Settings(dashboard_port=70000, config_file="nonexistent.yaml")


class TestYamlOverride:
    def test_yaml_overrides_fields(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text(
            "storage_key: my-portfolio\n"
            "refresh_interval_seconds: 30\n"
            "unknown_key: ignored\n"
        )
        settings = Settings(config_file=str(config))
        assert settings.storage_key == "my-portfolio"
        assert settings.refresh_interval_seconds == 30
        assert not hasattr(settings, "unknown_key")

    def test_empty_yaml_keeps_defaults(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("")
        settings = Settings(config_file=str(config))
        assert settings.storage_key == "stock-portfolio-data"


class TestLoadSettings:
    def test_overrides(self):
        settings = load_settings(finnhub_api_key="abc", config_file="nonexistent.yaml")
        assert settings.finnhub_api_key == "abc"

    def test_env_variable(self, monkeypatch):
        monkeypatch.setenv("STORAGE_KEY", "from-env")
        settings = load_settings(config_file="nonexistent.yaml")
        assert settings.storage_key == "from-env"
