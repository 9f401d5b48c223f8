# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Distributed cache engine.

The :class:`DistributedCache` is the primary public interface.  It maps
get / set / refresh / remove onto single-item store operations and
enforces expiry itself on every read: store-side reaping lags real time
and is never relied on for correctness.

The engine keeps no mutable state and takes no locks.  Concurrent
refreshes are safe because each one is a conditional in-place increment
executed atomically by the store.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

from dynacache.cache import expiration
from dynacache.cache.entry import AttributeNames, CacheEntry
from dynacache.cache.options import CacheEntryOptions
from dynacache.core.clock import Clock, SystemClock
from dynacache.core.exceptions import (
    ConditionFailedError,
    ConfigurationError,
    InvalidArgumentError,
)
from dynacache.store.base import StoreClient

logger = logging.getLogger("dynacache.cache.engine")

_DEFAULT_DURATION = timedelta(days=1)


class DistributedCache:
    """Byte-valued cache with absolute and sliding expiration.

    Every operation accepts ``cancel``, an :class:`asyncio.Event` checked
    once after argument validation.  If it is set the operation raises
    :class:`asyncio.CancelledError` without touching the store.  Once a
    store call is dispatched it is not rolled back.

    Args:
        store: Store client holding one item per cache key.
        clock: Time source; defaults to :class:`SystemClock`.
        table_name: Store table holding the entries.
        attributes: Attribute names of the entry fields.
        default_duration: Lifetime applied as absolute expiration relative
            to now when :meth:`set` receives no expiration options.
    """

    def __init__(
        self,
        store: StoreClient,
        *,
        clock: Clock | None = None,
        table_name: str = "cache",
        attributes: AttributeNames | None = None,
        default_duration: timedelta = _DEFAULT_DURATION,
    ) -> None:
        if store is None:
            raise ConfigurationError("a store client is required")
        if not table_name or not table_name.strip():
            raise ConfigurationError("table_name must not be blank")
        if default_duration <= timedelta(0):
            raise ConfigurationError("default_duration must be positive")
        self._store = store
        self._clock = clock or SystemClock()
        self._table = table_name
        self._names = attributes or AttributeNames()
        self._default_duration = default_duration

    # ------------------------------------------------------------------
    # Cache operations
    # ------------------------------------------------------------------

    async def get(self, key: str, *, cancel: asyncio.Event | None = None) -> bytes | None:
        """Return the cached bytes, or ``None`` if missing or expired.

        An entry with sliding expiration that has half its window or less
        left is refreshed before returning; a failed refresh fails the get.
        """
        _validate_key(key)
        _check_cancelled(cancel)

        item = await self._store.get_item(self._table, self._names.key_item(key))
        if item is None:
            logger.debug("Cache MISS for key %s", key[:12])
            return None

        entry = CacheEntry.from_item(item, self._names)
        now = self._clock.unix_seconds()
        if expiration.is_expired(entry.ttl, now):
            logger.debug("Cache EXPIRED for key %s (ttl=%d, now=%d)", key[:12], entry.ttl, now)
            return None

        if entry.sliding_span is not None and expiration.should_refresh(
            entry.ttl, now, entry.sliding_span
        ):
            logger.debug(
                "Sliding refresh for key %s (%ds left of %ds)",
                key[:12],
                entry.remaining(now),
                entry.sliding_span,
            )
            await self.refresh(key, cancel=cancel)

        logger.debug("Cache HIT for key %s", key[:12])
        return entry.value

    async def set(
        self,
        key: str,
        value: bytes,
        options: CacheEntryOptions | None = None,
        *,
        cancel: asyncio.Event | None = None,
    ) -> None:
        """Store *value* under *key*, replacing any existing entry.

        Raises:
            InvalidArgumentError: *key* is blank or *value* is not bytes.
            ConfigurationConflictError: Both absolute expiration forms are set.
        """
        _validate_key(key)
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise InvalidArgumentError("value must be bytes")
        _check_cancelled(cancel)

        if options is None or not options.has_expiration:
            options = CacheEntryOptions(
                absolute_expiration_relative_to_now=self._default_duration
            )
        entry = self._build_entry(key, bytes(value), options)
        await self._store.put_item(self._table, entry.to_item(self._names))
        logger.debug(
            "Cached key %s (ttl=%d, sliding=%s, absolute=%s)",
            key[:12],
            entry.ttl,
            entry.sliding_span,
            entry.absolute_timestamp,
        )

    async def refresh(self, key: str, *, cancel: asyncio.Event | None = None) -> None:
        """Extend a sliding entry's TTL by its span, up to its absolute ceiling.

        A no-op for missing entries, entries without sliding expiration and
        entries whose TTL has reached the ceiling.
        """
        _validate_key(key)
        _check_cancelled(cancel)

        try:
            await self._store.update_item(
                self._table,
                self._names.key_item(key),
                condition=expiration.refresh_condition(self._names),
                update=expiration.refresh_update(self._names),
            )
        except ConditionFailedError:
            logger.debug("Refresh skipped for key %s: not applicable", key[:12])
            return
        logger.debug("Refreshed key %s", key[:12])

    async def remove(self, key: str, *, cancel: asyncio.Event | None = None) -> None:
        """Delete the entry for *key*.  Missing keys are ignored."""
        _validate_key(key)
        _check_cancelled(cancel)

        await self._store.delete_item(self._table, self._names.key_item(key))
        logger.debug("Removed key %s", key[:12])

    # ------------------------------------------------------------------
    # String helpers
    # ------------------------------------------------------------------

    async def get_string(
        self,
        key: str,
        *,
        encoding: str = "utf-8",
        cancel: asyncio.Event | None = None,
    ) -> str | None:
        raw = await self.get(key, cancel=cancel)
        return raw.decode(encoding) if raw is not None else None

    async def set_string(
        self,
        key: str,
        value: str,
        options: CacheEntryOptions | None = None,
        *,
        encoding: str = "utf-8",
        cancel: asyncio.Event | None = None,
    ) -> None:
        if not isinstance(value, str):
            raise InvalidArgumentError("value must be a string")
        await self.set(key, value.encode(encoding), options, cancel=cancel)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def store(self) -> StoreClient:
        """Return the underlying store client."""
        return self._store

    @property
    def table_name(self) -> str:
        return self._table

    @property
    def attributes(self) -> AttributeNames:
        return self._names

    @property
    def clock(self) -> Clock:
        return self._clock

    async def close(self) -> None:
        """Release resources held by the store client."""
        await self._store.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_entry(self, key: str, value: bytes, options: CacheEntryOptions) -> CacheEntry:
        now = self._clock.now()
        sliding_span = expiration.sliding_span_seconds(options.sliding_expiration)
        absolute_timestamp = expiration.absolute_expiration_timestamp(
            now,
            options.absolute_expiration,
            options.absolute_expiration_relative_to_now,
        )
        ttl = expiration.initial_ttl(
            expiration.to_unix_seconds(now), sliding_span, absolute_timestamp
        )
        return CacheEntry(
            key=key,
            value=value,
            ttl=ttl,
            sliding_span=sliding_span,
            absolute_timestamp=absolute_timestamp,
        )


def _validate_key(key: str) -> None:
    if not isinstance(key, str) or not key.strip():
        raise InvalidArgumentError("key must be a non-blank string")


def _check_cancelled(cancel: asyncio.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise asyncio.CancelledError()
