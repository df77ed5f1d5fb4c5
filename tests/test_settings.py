"""Tests for pydantic-settings configuration."""

import pytest

from ledger.config import (
    AppSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from ledger.models.transaction import GroupingMode


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("CURRENCY_SYMBOL", raising=False)
        monkeypatch.delenv("DEFAULT_GROUP_MODE", raising=False)
        settings = AppSettings(_env_file=None)
        assert settings.currency_symbol == "₱"
        assert settings.default_group_mode == GroupingMode.NONE

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("CURRENCY_SYMBOL", " $ ")
        monkeypatch.setenv("DEFAULT_GROUP_MODE", "month")
        settings = AppSettings(_env_file=None)
        assert settings.currency_symbol == "$"
        assert settings.default_group_mode == GroupingMode.MONTH

    def test_rejects_blank_symbol(self, monkeypatch):
        monkeypatch.setenv("CURRENCY_SYMBOL", "   ")
        with pytest.raises(ValueError):
            AppSettings(_env_file=None)

    def test_rejects_unknown_group_mode(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_GROUP_MODE", "fortnight")
        with pytest.raises(ValueError):
            AppSettings(_env_file=None)


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_password_is_secret(self, monkeypatch):
        monkeypatch.setenv("LEDGER_STORAGE_SAVE_PASSWORD", "s3cret")
        settings = StorageSettings(_env_file=None)
        assert settings.save_password.get_secret_value() == "s3cret"
        assert "s3cret" not in repr(settings)

    def test_paths(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LEDGER_STORAGE_TRANSACTIONS_PATH", str(tmp_path / "t.json"))
        settings = StorageSettings(_env_file=None)
        assert settings.transactions_path == str(tmp_path / "t.json")
        assert settings.audit_log_path == "data/audit.jsonl"


class TestValidateAllSettings:
    """Tests for validate_all_settings()."""

    def test_reports_invalid_app_settings(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_GROUP_MODE", "fortnight")
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["app"] is False
        assert "app_error" in results
