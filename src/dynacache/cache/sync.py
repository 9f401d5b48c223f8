# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Blocking wrapper around :class:`~dynacache.cache.engine.DistributedCache`.

Usage::

    cache = get_sync_cache()
    cache.set_string("greeting", "hello")
    cache.get_string("greeting")
    cache.close()

Every call runs the async method to completion on one private event
loop (an :class:`asyncio.Runner`), so network store clients stay bound
to the loop they were created on.  It must **not** be called from within
an already-running event loop.  Sync methods are disabled by default
because they block the calling thread for a full store round trip.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

from dynacache.cache.engine import DistributedCache
from dynacache.cache.options import CacheEntryOptions
from dynacache.core.exceptions import SyncMethodsDisabledError

T = TypeVar("T")


class SyncDistributedCache:
    """Blocking facade with no logic of its own.

    Args:
        cache: The async cache to drive.
        enabled: When false every method raises
            :class:`SyncMethodsDisabledError` without touching the cache.
        runner: Runner whose loop *cache* was created on.  A new one is
            made when omitted.
    """

    def __init__(
        self,
        cache: DistributedCache,
        *,
        enabled: bool = False,
        runner: asyncio.Runner | None = None,
    ) -> None:
        self._cache = cache
        self._enabled = enabled
        self._runner = runner or asyncio.Runner()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def get(self, key: str) -> bytes | None:
        self._ensure_enabled()
        return self._run(self._cache.get(key))

    def set(self, key: str, value: bytes, options: CacheEntryOptions | None = None) -> None:
        self._ensure_enabled()
        self._run(self._cache.set(key, value, options))

    def refresh(self, key: str) -> None:
        self._ensure_enabled()
        self._run(self._cache.refresh(key))

    def remove(self, key: str) -> None:
        self._ensure_enabled()
        self._run(self._cache.remove(key))

    def get_string(self, key: str, *, encoding: str = "utf-8") -> str | None:
        self._ensure_enabled()
        return self._run(self._cache.get_string(key, encoding=encoding))

    def set_string(
        self,
        key: str,
        value: str,
        options: CacheEntryOptions | None = None,
        *,
        encoding: str = "utf-8",
    ) -> None:
        self._ensure_enabled()
        self._run(self._cache.set_string(key, value, options, encoding=encoding))

    def close(self) -> None:
        """Close the cache's store client and the private event loop."""
        try:
            self._run(self._cache.close())
        finally:
            self._runner.close()

    def _ensure_enabled(self) -> None:
        if not self._enabled:
            raise SyncMethodsDisabledError(
                "Sync methods are disabled; set DYNACACHE_ENABLE_SYNC_METHODS=true "
                "or use the async API."
            )

    def _run(self, coro: Coroutine[Any, Any, T]) -> T:
        return self._runner.run(coro)
