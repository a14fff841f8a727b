"""
Configuration Management for Balance Service

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: The low-balance threshold and the currency rate table
live here rather than in code. Operators can change them per environment
without touching the processor.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CurrencySettings(BaseSettings):
    """Base currency and fixed conversion rates."""
    
    model_config = SettingsConfigDict(
        env_prefix="CURRENCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    base_currency: str = Field(
        default="RUB",
        min_length=1,
        description="Currency all balances and history are kept in"
    )
    # JSON in the environment, e.g. CURRENCY_RATES='{"USD": 75, "EUR": 100}'
    rates: dict[str, Decimal] = Field(
        default_factory=lambda: {"USD": Decimal("75"), "EUR": Decimal("100")},
        description="Units of base currency per one unit of each foreign currency"
    )
    
    @field_validator("base_currency")
    @classmethod
    def normalize_base_currency(cls, v: str) -> str:
        return v.strip().upper()
    
    @field_validator("rates")
    @classmethod
    def validate_rates(cls, v: dict[str, Decimal]) -> dict[str, Decimal]:
        """Rates must be positive; codes are stored upper-cased."""
        normalized = {}
        for code, rate in v.items():
            if not rate.is_finite() or rate <= 0:
                raise ValueError(f"Rate for {code} must be a positive number, got {rate}")
            normalized[code.strip().upper()] = rate
        return normalized


class NotificationSettings(BaseSettings):
    """Low-balance alert configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    low_balance_threshold: Decimal = Field(
        default=Decimal("100"),
        ge=0,
        description="Balances strictly below this value trigger an alert"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    log_level: str = Field(
        default="INFO",
        description="Standard logging level name for local logs"
    )
    
    # Sanity limit on a single transaction, in the currency it is given in
    max_transaction_amount: Decimal = Field(
        default=Decimal("1E+15"),
        gt=0,
        description="Largest amount a single transaction may carry"
    )
    
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.
    
    Aggregates all sub-settings for easy access.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Sub-settings are loaded lazily to allow partial configuration
    
    @property
    def currency(self) -> CurrencySettings:
        return CurrencySettings()
    
    @property
    def notifications(self) -> NotificationSettings:
        return NotificationSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    Useful for startup checks.
    """
    results = {}
    
    settings = get_settings()
    
    sections = {
        "currency": lambda: settings.currency,
        "notifications": lambda: settings.notifications,
        "app": lambda: settings.app,
    }
    
    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
