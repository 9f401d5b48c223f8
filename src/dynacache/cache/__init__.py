# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Distributed cache engine with absolute and sliding expiration."""

from dynacache.cache.engine import DistributedCache
from dynacache.cache.entry import AttributeNames, CacheEntry
from dynacache.cache.factory import create_cache, get_cache, get_sync_cache
from dynacache.cache.options import CacheEntryOptions
from dynacache.cache.sync import SyncDistributedCache

__all__ = [
    "AttributeNames",
    "CacheEntry",
    "CacheEntryOptions",
    "DistributedCache",
    "SyncDistributedCache",
    "create_cache",
    "get_cache",
    "get_sync_cache",
]
