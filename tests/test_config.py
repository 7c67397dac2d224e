from __future__ import annotations

import pytest

from app.core.config import Settings


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("OM_MAX_PER_PAGE", "50")
    monkeypatch.setenv("OM_CURRENCY_SYMBOL", "€")

    settings = Settings(_env_file=None)

    assert settings.max_per_page == 50
    assert settings.currency_symbol == "€"
    assert settings.default_per_page == 15


def test_default_page_size_must_fit_limit():
    with pytest.raises(ValueError):
        Settings(_env_file=None, default_per_page=20, max_per_page=10)


def test_settings_only_declare_consumed_options():
    assert set(Settings.model_fields) == {
        "app_name",
        "database_url",
        "sql_echo",
        "sqlite_busy_timeout",
        "log_level",
        "default_per_page",
        "max_per_page",
        "currency_symbol",
        "bootstrap_demo_on_startup",
        "demo_seed",
    }
