# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

import pytest

from dynacache.cache.engine import DistributedCache
from dynacache.cache.entry import AttributeNames
from dynacache.core.clock import FrozenClock
from dynacache.store.memory import MemoryStoreClient

TABLE = "cache"


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(0)


@pytest.fixture
def names() -> AttributeNames:
    return AttributeNames()


@pytest.fixture
def store(names: AttributeNames) -> MemoryStoreClient:
    return MemoryStoreClient(key_attribute=names.key, ttl_attribute=names.ttl)


@pytest.fixture
def cache(store: MemoryStoreClient, clock: FrozenClock) -> DistributedCache:
    return DistributedCache(store, clock=clock, table_name=TABLE)


@pytest.fixture(autouse=True)
def _clear_cache():
    """Reset the cache singleton between tests."""
    from dynacache.cache.factory import reset_cache

    reset_cache()
    yield
    reset_cache()


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch, tmp_path):
    """Keep a developer's .env and DYNACACHE_* variables out of tests."""
    import os

    for name in list(os.environ):
        if name.startswith("DYNACACHE_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
