"""
Configuration Management for Personal Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The ledger has only two concerns that need configuring: how amounts
are displayed and where the append-only transaction history lives.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ledger.models.transaction import GroupingMode


class StorageSettings(BaseSettings):
    """Transaction and audit file storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    transactions_path: str = Field(
        default="data/transactions.json",
        description="Path to the JSON file holding the transaction history"
    )
    audit_log_path: str = Field(
        default="data/audit.jsonl",
        description="Path to the JSON-lines audit log"
    )

    # Saving is refused while no password is configured
    save_password: Optional[SecretStr] = Field(
        default=None,
        description="Password required to append a transaction"
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

    # Display
    currency_symbol: str = Field(
        default="₱",
        min_length=1,
        max_length=5,
        description="Symbol shown in front of amounts"
    )
    default_group_mode: GroupingMode = Field(
        default=GroupingMode.NONE,
        description="Grouping mode selected when the ledger first opens"
    )

    @field_validator('currency_symbol')
    @classmethod
    def strip_currency_symbol(cls, v: str) -> str:
        """Search prefixes compare against the bare symbol."""
        v = v.strip()
        if not v:
            raise ValueError("Currency symbol cannot be blank")
        return v


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

    Returns a dict of {setting_name: is_valid}, with an
    additional "<name>_error" entry for each failure.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except ValueError as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except ValueError as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
