# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Build caches and store clients from application settings."""

from __future__ import annotations

import asyncio
import logging

from dynacache.cache.engine import DistributedCache
from dynacache.cache.entry import AttributeNames
from dynacache.cache.sync import SyncDistributedCache
from dynacache.core.clock import Clock
from dynacache.core.config import Settings, get_settings
from dynacache.core.exceptions import ConfigurationError
from dynacache.store.base import StoreClient
from dynacache.store.memory import MemoryStoreClient

logger = logging.getLogger("dynacache.cache.factory")

STORE_BACKENDS = ("memory", "redis", "dynamodb")

# Module-level singleton
_cache: DistributedCache | None = None
_cache_lock: asyncio.Lock | None = None


def attribute_names_from_settings(settings: Settings) -> AttributeNames:
    return AttributeNames(
        key=settings.key_attribute,
        value=settings.value_attribute,
        ttl=settings.ttl_attribute,
        sliding=settings.sliding_attribute,
        absolute=settings.absolute_attribute,
    )


async def create_store(settings: Settings) -> StoreClient:
    """Instantiate the store client selected by ``settings.store_backend``.

    Raises:
        ConfigurationError: Unknown backend, or its driver is not installed.
    """
    backend = settings.store_backend

    if backend == "memory":
        return MemoryStoreClient(
            key_attribute=settings.key_attribute,
            ttl_attribute=settings.ttl_attribute,
        )

    if backend == "redis":
        from dynacache.store.redis import RedisStoreClient

        return RedisStoreClient(
            settings.redis_url,
            key_attribute=settings.key_attribute,
            ttl_attribute=settings.ttl_attribute,
            key_prefix=settings.redis_key_prefix,
        )

    if backend == "dynamodb":
        from dynacache.store.dynamodb import DynamoDbStoreClient

        return await DynamoDbStoreClient.connect(
            region_name=settings.dynamodb_region,
            endpoint_url=settings.dynamodb_endpoint_url,
        )

    raise ConfigurationError(
        f"Unknown store backend {backend!r}; expected one of {', '.join(STORE_BACKENDS)}"
    )


async def create_cache(
    settings: Settings | None = None,
    *,
    store: StoreClient | None = None,
    clock: Clock | None = None,
) -> DistributedCache:
    """Construct a fully-wired :class:`DistributedCache`.

    Parameters
    ----------
    settings:
        Optional ``Settings`` override; falls back to ``get_settings()``.
    store:
        Use this store client instead of building one from *settings*.
    clock:
        Time source; the system clock when omitted.
    """
    settings = settings or get_settings()
    if store is None:
        store = await create_store(settings)
    logger.debug(
        "Cache wired to %s store, table %s", type(store).__name__, settings.table_name
    )
    return DistributedCache(
        store,
        clock=clock,
        table_name=settings.table_name,
        attributes=attribute_names_from_settings(settings),
        default_duration=settings.default_duration,
    )


async def get_cache() -> DistributedCache:
    """Return the module-level :class:`DistributedCache` singleton.

    Creates a new instance on first call using application settings.
    Concurrent first calls share one instance.
    """
    global _cache, _cache_lock
    if _cache is None:
        if _cache_lock is None:
            _cache_lock = asyncio.Lock()
        async with _cache_lock:
            if _cache is None:
                _cache = await create_cache()
    return _cache


def get_sync_cache(
    settings: Settings | None = None,
    *,
    store: StoreClient | None = None,
    clock: Clock | None = None,
) -> SyncDistributedCache:
    """Build a blocking cache honouring ``enable_sync_methods``.

    The cache and its store client are created on the facade's own event
    loop, which every later call reuses.
    """
    settings = settings or get_settings()
    runner = asyncio.Runner()
    try:
        cache = runner.run(create_cache(settings, store=store, clock=clock))
    except BaseException:
        runner.close()
        raise
    return SyncDistributedCache(cache, enabled=settings.enable_sync_methods, runner=runner)


def reset_cache() -> None:
    """Reset the singleton (useful for testing)."""
    global _cache, _cache_lock
    _cache = None
    _cache_lock = None
