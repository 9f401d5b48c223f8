# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Unit tests for CLI commands."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from dynacache.cache.engine import DistributedCache
from dynacache.cli.app import app
from dynacache.core.clock import FrozenClock
from dynacache.store.memory import MemoryStoreClient

runner = CliRunner()


class _PersistentStore(MemoryStoreClient):
    """Survives ``close()`` so several commands can share it."""

    async def close(self) -> None:
        return None


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(1_000)


@pytest.fixture
def patched_cache(clock: FrozenClock):
    store = _PersistentStore(ttl_attribute="ttl_value")

    async def _create_cache(*args, **kwargs) -> DistributedCache:
        return DistributedCache(store, clock=clock)

    with patch("dynacache.cache.factory.create_cache", side_effect=_create_cache):
        yield store


class TestSetGet:
    def test_set_then_get(self, patched_cache) -> None:
        result = runner.invoke(app, ["set", "k1", "hello"])
        assert result.exit_code == 0, result.output
        assert "Stored k1" in result.stdout

        result = runner.invoke(app, ["get", "k1"])
        assert result.exit_code == 0
        assert "hello" in result.stdout

    def test_get_missing(self, patched_cache) -> None:
        result = runner.invoke(app, ["get", "nope"])
        assert result.exit_code == 1

    def test_get_expired(self, patched_cache, clock: FrozenClock) -> None:
        runner.invoke(app, ["set", "k1", "hello", "--ttl", "5"])
        clock.advance(6)
        result = runner.invoke(app, ["get", "k1"])
        assert result.exit_code == 1

    def test_set_conflicting_options(self, patched_cache) -> None:
        result = runner.invoke(
            app, ["set", "k1", "v", "--ttl", "5", "--expires-at", "2030-01-01T00:00:00"]
        )
        assert result.exit_code == 2
        assert patched_cache.size("cache") == 0

    def test_set_rejects_non_positive_sliding(self, patched_cache) -> None:
        result = runner.invoke(app, ["set", "k1", "v", "--sliding", "0"])
        assert result.exit_code == 2

    def test_blank_key(self, patched_cache) -> None:
        result = runner.invoke(app, ["get", " "])
        assert result.exit_code == 2


class TestRefreshRemove:
    def test_refresh_extends_sliding(self, patched_cache) -> None:
        runner.invoke(app, ["set", "k1", "v", "--sliding", "30"])
        result = runner.invoke(app, ["refresh", "k1"])
        assert result.exit_code == 0
        assert "Refreshed k1" in result.stdout

    def test_remove(self, patched_cache) -> None:
        runner.invoke(app, ["set", "k1", "v"])
        result = runner.invoke(app, ["remove", "k1"])
        assert result.exit_code == 0
        assert patched_cache.size("cache") == 0


class TestInspect:
    def test_inspect_live_entry(self, patched_cache) -> None:
        runner.invoke(app, ["set", "k1", "hello", "--sliding", "30", "--ttl", "600"])
        result = runner.invoke(app, ["inspect", "k1"])
        assert result.exit_code == 0, result.output
        assert "30s" in result.stdout
        assert "LIVE" in result.stdout

    def test_inspect_shows_expired(self, patched_cache, clock: FrozenClock) -> None:
        runner.invoke(app, ["set", "k1", "hello", "--ttl", "5"])
        clock.advance(60)
        result = runner.invoke(app, ["inspect", "k1"])
        assert result.exit_code == 0
        assert "EXPIRED" in result.stdout

    def test_inspect_missing(self, patched_cache) -> None:
        result = runner.invoke(app, ["inspect", "nope"])
        assert result.exit_code == 1


class TestWiring:
    def test_bad_backend_reports_error(self, monkeypatch) -> None:
        monkeypatch.setenv("DYNACACHE_STORE_BACKEND", "memcached")
        result = runner.invoke(app, ["get", "k1"])
        assert result.exit_code == 2

    def test_store_failure_surfaces(self) -> None:
        store = AsyncMock(spec=MemoryStoreClient)
        store.get_item.side_effect = ConnectionError("down")

        async def _create_cache(*args, **kwargs) -> DistributedCache:
            return DistributedCache(store, clock=FrozenClock(0))

        with patch("dynacache.cache.factory.create_cache", side_effect=_create_cache):
            result = runner.invoke(app, ["get", "k1"])
        assert result.exit_code != 0
        assert isinstance(result.exception, ConnectionError)

    def test_version(self) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "dynacache 0.1.0" in result.stdout
