"""
Test suite for configuration
"""

import pytest

from microloans.config import MicroloansConfig, get_config, reload_config
from microloans.currency import Currency


class TestConfig:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("MICROLOANS_DEFAULT_CURRENCY", raising=False)
        config = MicroloansConfig(_env_file=None)

        assert config.currency == Currency.ZAR
        assert config.log_format == "json"
        assert config.enable_events is True

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("MICROLOANS_DEFAULT_CURRENCY", "kes")
        monkeypatch.setenv("MICROLOANS_API_PORT", "9100")
        config = MicroloansConfig(_env_file=None)

        assert config.currency == Currency.KES
        assert config.api_port == 9100

    def test_unknown_currency(self):
        config = MicroloansConfig(_env_file=None, default_currency="XYZ")
        with pytest.raises(ValueError, match="Unsupported currency"):
            config.currency

    def test_reload(self, monkeypatch):
        original = get_config()
        monkeypatch.setenv("MICROLOANS_LOG_LEVEL", "DEBUG")
        try:
            assert reload_config().log_level == "DEBUG"
            assert get_config() is not original
        finally:
            monkeypatch.delenv("MICROLOANS_LOG_LEVEL")
            reload_config()
