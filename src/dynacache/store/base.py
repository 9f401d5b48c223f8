# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract store client interface.

A store holds one item per primary key in a named table.  Items are
attribute maps in the DynamoDB item model: each attribute value is a
single-entry dict tagging its type, ``{"S": str}``, ``{"N": str}`` or
``{"B": bytes}``.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dynacache.store.expressions import Condition, Update

AttributeValue = dict[str, Any]
Item = dict[str, AttributeValue]


class StoreClient(abc.ABC):
    """Abstract base class for store clients.

    Every operation is a single atomic round trip.  Transport,
    throttling and permission failures are raised as whatever the
    underlying driver raises; only a failed write condition is
    translated, to :class:`~dynacache.core.exceptions.ConditionFailedError`.
    """

    @abc.abstractmethod
    async def get_item(self, table: str, key: Item) -> Item | None:
        """Fetch the item addressed by *key*.

        Returns:
            The full attribute map, or ``None`` if no such item exists.
        """

    @abc.abstractmethod
    async def put_item(self, table: str, item: Item) -> None:
        """Write *item*, replacing any existing item with the same key."""

    @abc.abstractmethod
    async def update_item(
        self,
        table: str,
        key: Item,
        *,
        condition: Condition,
        update: Update,
    ) -> None:
        """Apply *update* to the item only if *condition* holds.

        Check and mutation happen atomically at the store.

        Raises:
            ConditionFailedError: The item is missing or *condition* is
                false for it.  Nothing was written.
        """

    @abc.abstractmethod
    async def delete_item(self, table: str, key: Item) -> None:
        """Delete the item addressed by *key*.  A missing item is not an error."""

    @abc.abstractmethod
    async def close(self) -> None:
        """Release any resources held by the client."""


def key_value(key: Item) -> str:
    """Return the scalar of a single-attribute string primary key."""
    if len(key) != 1:
        raise ValueError(f"expected a single-attribute key, got {sorted(key)}")
    (attr,) = key.values()
    if "S" not in attr:
        raise ValueError("primary key attribute must be a string ('S') value")
    return attr["S"]
