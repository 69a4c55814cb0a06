"""
Configuration Management for Expense Manager

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger rules themselves take no configuration; only storage location,
display currency and logging are tunable.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_MANAGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    backend: str = Field(
        default="file",
        pattern="^(file|memory)$",
        description="Key-value backend: 'file' (JSON file) or 'memory'"
    )
    data_path: Path = Field(
        default=Path("~/.expense_manager/storage.json"),
        description="JSON file backing the key-value store"
    )
    
    # Keys within the store
    transactions_key: str = Field(
        default="expenses",
        min_length=1,
        description="Key holding the serialized transaction list"
    )
    savings_key: str = Field(
        default="savings",
        min_length=1,
        description="Key holding the savings balance"
    )
    
    @field_validator('data_path')
    @classmethod
    def expand_data_path(cls, v: Path) -> Path:
        """Expand '~' so the path can be used directly."""
        return v.expanduser()


class AppSettings(BaseSettings):
    """
    Main application settings.
    
    Loads configuration from environment variables and .env file.
    """
    
    model_config = SettingsConfigDict(
        env_prefix="EXPENSE_MANAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    # Display currency
    currency_code: str = Field(
        default="KWD",
        min_length=1,
        max_length=8,
        description="Base currency unit label"
    )
    sub_unit_name: str = Field(
        default="Fils",
        min_length=1,
        description="Label for values below one base unit"
    )
    sub_unit_scale: int = Field(
        default=1000,
        ge=1,
        description="Sub-units per base unit"
    )
    
    # Summary view sizes
    recent_limit: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Transactions shown in the recent list"
    )
    savings_history_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Transactions shown in the savings history"
    )
    
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for activity logging"
    )


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
    
    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()
    
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
    
    Returns a dict of {setting_name: is_valid}, with an extra
    '<name>_error' entry for each group that failed to load.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
