# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Store clients the cache engine runs on."""

from dynacache.store.base import AttributeValue, Item, StoreClient
from dynacache.store.memory import MemoryStoreClient

__all__ = ["AttributeValue", "Item", "MemoryStoreClient", "StoreClient"]
