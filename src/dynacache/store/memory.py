# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""In-process store client.

This is the default store and requires no external services.  Tables
are plain dicts of deep-copied items.  No method awaits between reading
and writing an item, so every operation, including the conditional
update, is atomic with respect to other coroutines on the event loop.

Like DynamoDB's TTL reaper, physical deletion of expired items is best
effort: nothing is removed until :meth:`MemoryStoreClient.purge_expired`
runs.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING

from dynacache.core.exceptions import ConditionFailedError
from dynacache.store.base import Item, StoreClient, key_value

if TYPE_CHECKING:
    from dynacache.store.expressions import Condition, Update

logger = logging.getLogger("dynacache.store.memory")


class MemoryStoreClient(StoreClient):
    """Dict-backed store honouring the :class:`StoreClient` contract.

    Args:
        key_attribute: Name of the string attribute every table is keyed on.
        ttl_attribute: Number attribute holding each item's expiry in
            unix seconds.  Used only by :meth:`purge_expired`.
    """

    def __init__(self, key_attribute: str = "key", ttl_attribute: str | None = None) -> None:
        self._tables: dict[str, dict[str, Item]] = {}
        self._key_attribute = key_attribute
        self._ttl_attribute = ttl_attribute

    # ------------------------------------------------------------------
    # StoreClient interface
    # ------------------------------------------------------------------

    async def get_item(self, table: str, key: Item) -> Item | None:
        item = self._table(table).get(key_value(key))
        return copy.deepcopy(item) if item is not None else None

    async def put_item(self, table: str, item: Item) -> None:
        if self._key_attribute not in item:
            raise ValueError(f"item is missing key attribute {self._key_attribute!r}")
        k = key_value({self._key_attribute: item[self._key_attribute]})
        self._table(table)[k] = copy.deepcopy(item)

    async def update_item(
        self,
        table: str,
        key: Item,
        *,
        condition: Condition,
        update: Update,
    ) -> None:
        item = self._table(table).get(key_value(key))
        if item is None or not condition.evaluate(item):
            raise ConditionFailedError(f"condition not met for item in table {table!r}")
        update.apply(item)

    async def delete_item(self, table: str, key: Item) -> None:
        self._table(table).pop(key_value(key), None)

    async def close(self) -> None:
        self._tables.clear()

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def purge_expired(self, now: int) -> int:
        """Physically delete items whose TTL attribute is before *now*.

        Returns:
            The number of items removed.
        """
        if self._ttl_attribute is None:
            return 0
        removed = 0
        for table, items in self._tables.items():
            expired = [
                k
                for k, item in items.items()
                if "N" in item.get(self._ttl_attribute, {})
                and int(item[self._ttl_attribute]["N"]) < now
            ]
            for k in expired:
                del items[k]
            removed += len(expired)
            if expired:
                logger.debug("Purged %d expired items from %s", len(expired), table)
        return removed

    def size(self, table: str) -> int:
        """Number of items physically present in *table*."""
        return len(self._tables.get(table, {}))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _table(self, table: str) -> dict[str, Item]:
        return self._tables.setdefault(table, {})