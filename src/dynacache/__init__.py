# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""dynacache - Distributed cache with sliding expiration over key-value stores."""

__version__ = "0.1.0"

from dynacache.cache import (
    AttributeNames,
    CacheEntryOptions,
    DistributedCache,
    SyncDistributedCache,
    create_cache,
    get_cache,
    get_sync_cache,
)
from dynacache.core.clock import Clock, FrozenClock, SystemClock

__all__ = [
    "AttributeNames",
    "CacheEntryOptions",
    "Clock",
    "DistributedCache",
    "FrozenClock",
    "SyncDistributedCache",
    "SystemClock",
    "__version__",
    "create_cache",
    "get_cache",
    "get_sync_cache",
]
