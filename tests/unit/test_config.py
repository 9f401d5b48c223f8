# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for settings loading and validation."""

from __future__ import annotations

from datetime import timedelta

import pytest
from pydantic import ValidationError

from dynacache.core.config import Settings, get_settings


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.table_name == "cache"
        assert settings.key_attribute == "key"
        assert settings.value_attribute == "value"
        assert settings.ttl_attribute == "ttl_value"
        assert settings.sliding_attribute == "sliding_exp_timespan"
        assert settings.absolute_attribute == "abs_exp_timestamp"
        assert settings.default_duration == timedelta(days=1)
        assert settings.enable_sync_methods is False
        assert settings.store_backend == "memory"

    def test_env_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("DYNACACHE_TABLE_NAME", "sessions")
        monkeypatch.setenv("DYNACACHE_DEFAULT_DURATION_SECONDS", "600")
        monkeypatch.setenv("DYNACACHE_ENABLE_SYNC_METHODS", "true")
        monkeypatch.setenv("DYNACACHE_STORE_BACKEND", " Redis ")
        settings = get_settings()
        assert settings.table_name == "sessions"
        assert settings.default_duration == timedelta(minutes=10)
        assert settings.enable_sync_methods is True
        assert settings.store_backend == "redis"

    def test_dotenv_file(self, tmp_path, monkeypatch) -> None:
        (tmp_path / ".env").write_text("DYNACACHE_TTL_ATTRIBUTE=expires_at\n")
        monkeypatch.chdir(tmp_path)
        assert Settings().ttl_attribute == "expires_at"

    def test_rejects_duplicate_attribute_names(self) -> None:
        with pytest.raises(ValidationError, match="distinct"):
            Settings(ttl_attribute="value")

    def test_rejects_reserved_ttl_name(self) -> None:
        with pytest.raises(ValidationError, match="reserved"):
            Settings(ttl_attribute="ttl")

    def test_rejects_blank_attribute_name(self) -> None:
        with pytest.raises(ValidationError, match="blank"):
            Settings(sliding_attribute=" ")

    @pytest.mark.parametrize("seconds", [0, -5])
    def test_rejects_non_positive_default(self, seconds: int) -> None:
        with pytest.raises(ValidationError):
            Settings(default_duration_seconds=seconds)
