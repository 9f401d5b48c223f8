# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Redis store client using the ``redis`` async client.

Each item is a Redis hash.  Attribute values are stored raw in hash
fields and their type tags (``S``/``N``/``B``) in one extra field, so
number attributes stay usable by ``HINCRBY``.  Conditional updates run
as a single Lua script: Redis executes scripts atomically, which gives
the same guarantee as a DynamoDB condition expression.

This backend is **optional** -- if the ``redis`` package is not installed
the module can still be imported but :class:`RedisStoreClient` will raise
a clear error at instantiation time unless a client is passed in.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from dynacache.core.exceptions import ConditionFailedError, ConfigurationError
from dynacache.store.base import Item, StoreClient, key_value
from dynacache.store.expressions import AttributeAliases

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from dynacache.store.expressions import Condition, Update

logger = logging.getLogger("dynacache.store.redis")

_TYPES_FIELD = "__dynacache_types__"

# Expiry is pushed one second past the TTL so that an item stays readable
# for the whole second it is still valid in.
_REAP_GRACE_SECONDS = 1

_UPDATE_SCRIPT = """\
local raw = redis.call('HGETALL', KEYS[1])
if #raw == 0 then return 0 end
local h = {{}}
for i = 1, #raw, 2 do h[raw[i]] = raw[i + 1] end
if not ({condition}) then return 0 end
{update}
{expire}
return 1
"""

_EXPIRE_SNIPPET = """\
local t = tonumber(redis.call('HGET', KEYS[1], {ttl}))
if t then redis.call('EXPIREAT', KEYS[1], t + {grace}) end"""

try:
    import redis.asyncio as aioredis

    _REDIS_AVAILABLE = True
except ImportError:  # pragma: no cover
    aioredis = None  # type: ignore[assignment]
    _REDIS_AVAILABLE = False


def redis_available() -> bool:
    """Return ``True`` if the ``redis`` package is installed."""
    return _REDIS_AVAILABLE


class RedisStoreClient(StoreClient):
    """Redis-backed store using ``redis-py`` async client.

    Args:
        redis_url: Redis connection URL (e.g. ``redis://localhost:6379/0``).
        key_attribute: Name of the string attribute every table is keyed on.
        ttl_attribute: Number attribute mirrored into ``EXPIREAT`` so Redis
            reaps expired items on its own.
        key_prefix: Namespace prepended to every Redis key.
        client: An existing ``redis.asyncio.Redis`` to use instead of
            connecting to *redis_url*.  It must not decode responses.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        *,
        key_attribute: str = "key",
        ttl_attribute: str | None = None,
        key_prefix: str = "dynacache:",
        client: Redis | None = None,
    ) -> None:
        if client is None:
            if not _REDIS_AVAILABLE:
                raise ConfigurationError(
                    "The 'redis' package is required for the Redis store. "
                    "Install it with: pip install 'dynacache[redis]'"
                )
            client = aioredis.from_url(redis_url, decode_responses=False)
        self._client: Redis = client
        self._key_attribute = key_attribute
        self._ttl_attribute = ttl_attribute
        self._key_prefix = key_prefix
        self._scripts: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # StoreClient interface
    # ------------------------------------------------------------------

    async def get_item(self, table: str, key: Item) -> Item | None:
        raw = await self._client.hgetall(self._redis_key(table, key))
        if not raw:
            return None
        return _decode(raw)

    async def put_item(self, table: str, item: Item) -> None:
        if self._key_attribute not in item:
            raise ValueError(f"item is missing key attribute {self._key_attribute!r}")
        rkey = self._redis_key(table, {self._key_attribute: item[self._key_attribute]})
        mapping = _encode(item)
        async with self._client.pipeline(transaction=True) as pipe:
            pipe.delete(rkey)
            pipe.hset(rkey, mapping=mapping)
            expiry = self._expiry_of(item)
            if expiry is not None:
                pipe.expireat(rkey, expiry)
            await pipe.execute()

    async def update_item(
        self,
        table: str,
        key: Item,
        *,
        condition: Condition,
        update: Update,
    ) -> None:
        argv = AttributeAliases("ARGV[{}]", start=1)
        condition_lua = condition.to_lua(argv)
        update_lua = update.to_lua(argv)
        expire_lua = ""
        if self._ttl_attribute is not None:
            expire_lua = _EXPIRE_SNIPPET.format(
                ttl=argv(self._ttl_attribute), grace=_REAP_GRACE_SECONDS
            )
        source = _UPDATE_SCRIPT.format(
            condition=condition_lua, update=update_lua, expire=expire_lua
        )
        script = self._scripts.get(source)
        if script is None:
            script = self._client.register_script(source)
            self._scripts[source] = script

        applied = await script(keys=[self._redis_key(table, key)], args=argv.names)
        if not applied:
            raise ConditionFailedError(f"condition not met for item in table {table!r}")

    async def delete_item(self, table: str, key: Item) -> None:
        await self._client.delete(self._redis_key(table, key))

    async def close(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _redis_key(self, table: str, key: Item) -> str:
        return f"{self._key_prefix}{table}:{key_value(key)}"

    def _expiry_of(self, item: Item) -> int | None:
        if self._ttl_attribute is None:
            return None
        attr = item.get(self._ttl_attribute)
        if attr is None or "N" not in attr:
            return None
        return int(attr["N"]) + _REAP_GRACE_SECONDS


def _encode(item: Item) -> dict[str, bytes | str]:
    mapping: dict[str, bytes | str] = {}
    types: dict[str, str] = {}
    for name, attr in item.items():
        ((type_tag, value),) = attr.items()
        if type_tag not in ("S", "N", "B"):
            raise ValueError(f"unsupported attribute type {type_tag!r} for {name!r}")
        types[name] = type_tag
        mapping[name] = bytes(value) if type_tag == "B" else str(value)
    mapping[_TYPES_FIELD] = json.dumps(types)
    return mapping


def _decode(raw: dict[bytes, bytes]) -> Item:
    fields = {
        (k.decode() if isinstance(k, bytes) else k): v for k, v in raw.items()
    }
    types_raw = fields.pop(_TYPES_FIELD, None)
    if types_raw is None:
        raise ValueError("hash has no type map; it was not written by dynacache")
    types: dict[str, str] = json.loads(types_raw)
    item: Item = {}
    for name, value in fields.items():
        type_tag = types.get(name, "S")
        if type_tag == "B":
            item[name] = {"B": bytes(value)}
        else:
            text = value.decode() if isinstance(value, bytes) else str(value)
            item[name] = {type_tag: text}
    return item
