# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Cache entries and their store item representation."""

from __future__ import annotations

from dataclasses import dataclass

from dynacache.store.base import Item


@dataclass(frozen=True)
class AttributeNames:
    """Store attribute names used for each part of a cache entry."""

    key: str = "key"
    value: str = "value"
    ttl: str = "ttl_value"
    sliding: str = "sliding_exp_timespan"
    absolute: str = "abs_exp_timestamp"

    def __post_init__(self) -> None:
        names = (self.key, self.value, self.ttl, self.sliding, self.absolute)
        if any(not n or not n.strip() for n in names):
            raise ValueError("attribute names must not be blank")
        if len(set(names)) != len(names):
            raise ValueError(f"attribute names must be distinct: {names}")

    def key_item(self, key: str) -> Item:
        return {self.key: {"S": key}}


@dataclass(frozen=True)
class CacheEntry:
    """One cached value with its expiration state.

    ``ttl`` is the only field consulted on read.  ``sliding_span`` and
    ``absolute_timestamp`` are fixed when the entry is written; refresh
    only moves ``ttl``.
    """

    key: str
    value: bytes
    ttl: int
    sliding_span: int | None = None
    absolute_timestamp: int | None = None

    def to_item(self, names: AttributeNames) -> Item:
        item: Item = {
            names.key: {"S": self.key},
            names.value: {"B": self.value},
        }
        if self.sliding_span is not None:
            item[names.sliding] = {"N": str(self.sliding_span)}
        if self.absolute_timestamp is not None:
            item[names.absolute] = {"N": str(self.absolute_timestamp)}
        item[names.ttl] = {"N": str(self.ttl)}
        return item

    @classmethod
    def from_item(cls, item: Item, names: AttributeNames) -> CacheEntry:
        return cls(
            key=item[names.key]["S"],
            value=bytes(item[names.value]["B"]),
            ttl=int(item[names.ttl]["N"]),
            sliding_span=_optional_number(item, names.sliding),
            absolute_timestamp=_optional_number(item, names.absolute),
        )

    def remaining(self, now: int) -> int:
        """Seconds until ``ttl``; negative once expired."""
        return self.ttl - now


def _optional_number(item: Item, name: str) -> int | None:
    attr = item.get(name)
    return int(attr["N"]) if attr is not None else None
