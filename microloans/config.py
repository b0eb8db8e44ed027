"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from .currency import Currency


class MicroloansConfig(BaseSettings):
    """Microloans ledger configuration"""

    model_config = SettingsConfigDict(
        env_prefix="MICROLOANS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Ledger configuration
    default_currency: str = "ZAR"

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Feature flags
    enable_events: bool = True

    @property
    def currency(self) -> Currency:
        """Resolve ``default_currency`` to a Currency member"""
        try:
            return Currency[self.default_currency.upper()]
        except KeyError:
            raise ValueError(f"Unsupported currency code: {self.default_currency}")


# Global configuration instance
config = MicroloansConfig()


def get_config() -> MicroloansConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> MicroloansConfig:
    """Reload configuration from environment"""
    global config
    config = MicroloansConfig()
    return config
