"""Unit tests for config.settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from config import CompatibilitySettings, ResolverSettings, Settings, get_settings


def test_defaults() -> None:
    resolver = ResolverSettings()

    assert resolver.version_fetch_window == 1
    assert resolver.max_skill_closure_rounds == 32
    assert resolver.max_concurrent_fetches == 16
    assert CompatibilitySettings().max_exploration_schema_version == 55


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("TOPIC_PACK_RESOLVER_VERSION_FETCH_WINDOW", "4")
    monkeypatch.setenv("TOPIC_PACK_FETCH_BASE_URL", "https://content.example.org")

    settings = Settings.load_from_env_file()

    assert settings.resolver.version_fetch_window == 4
    assert settings.fetch.base_url == "https://content.example.org"


def test_env_file_is_loaded(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("TOPIC_PACK_COMPAT_MAX_SKILL_SCHEMA_VERSION", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("TOPIC_PACK_COMPAT_MAX_SKILL_SCHEMA_VERSION=9\n", encoding="utf-8")

    settings = Settings.load_from_env_file(env_file)

    assert settings.compatibility.max_skill_schema_version == 9


def test_window_must_be_positive(monkeypatch) -> None:
    monkeypatch.setenv("TOPIC_PACK_RESOLVER_VERSION_FETCH_WINDOW", "0")

    with pytest.raises(ValidationError):
        ResolverSettings()


def test_get_settings_is_cached() -> None:
    get_settings.cache_clear()

    assert get_settings() is get_settings()
