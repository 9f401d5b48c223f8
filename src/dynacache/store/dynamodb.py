# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""DynamoDB store client over an ``aioboto3`` low-level client.

Items travel in DynamoDB's own attribute-value format, so no conversion
is needed.  Conditional updates map directly onto ``UpdateItem`` with a
``ConditionExpression``; ``ConditionalCheckFailedException`` is the
only error translated.  Everything else (throttling, auth, network) is
raised as the ``botocore`` exception it is.

Physical expiry relies on the table's TTL setting pointing at the TTL
attribute; this client does not configure it.
"""

from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING, Any

from dynacache.core.exceptions import ConditionFailedError, ConfigurationError
from dynacache.store.base import Item, StoreClient
from dynacache.store.expressions import AttributeAliases

if TYPE_CHECKING:
    from dynacache.store.expressions import Condition, Update

logger = logging.getLogger("dynacache.store.dynamodb")

try:
    import aioboto3

    _AIOBOTO3_AVAILABLE = True
except ImportError:  # pragma: no cover
    aioboto3 = None  # type: ignore[assignment]
    _AIOBOTO3_AVAILABLE = False


def dynamodb_available() -> bool:
    """Return ``True`` if the ``aioboto3`` package is installed."""
    return _AIOBOTO3_AVAILABLE


class DynamoDbStoreClient(StoreClient):
    """Store client for Amazon DynamoDB.

    Args:
        client: An open ``aioboto3`` / ``aiobotocore`` DynamoDB client.
        consistent_read: Issue strongly consistent ``GetItem`` calls.
        exit_stack: Owns *client*'s context; closed by :meth:`close`.
    """

    def __init__(
        self,
        client: Any,
        *,
        consistent_read: bool = False,
        exit_stack: contextlib.AsyncExitStack | None = None,
    ) -> None:
        self._client = client
        self._consistent_read = consistent_read
        self._exit_stack = exit_stack

    @classmethod
    async def connect(
        cls,
        *,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        consistent_read: bool = False,
    ) -> DynamoDbStoreClient:
        """Open a client from the default AWS credential chain."""
        if not _AIOBOTO3_AVAILABLE:
            raise ConfigurationError(
                "The 'aioboto3' package is required for the DynamoDB store. "
                "Install it with: pip install 'dynacache[dynamodb]'"
            )
        stack = contextlib.AsyncExitStack()
        session = aioboto3.Session()
        client = await stack.enter_async_context(
            session.client(
                "dynamodb",
                region_name=region_name or None,
                endpoint_url=endpoint_url or None,
            )
        )
        logger.debug("Connected DynamoDB client (region=%s)", region_name or "default")
        return cls(client, consistent_read=consistent_read, exit_stack=stack)

    # ------------------------------------------------------------------
    # StoreClient interface
    # ------------------------------------------------------------------

    async def get_item(self, table: str, key: Item) -> Item | None:
        response = await self._client.get_item(
            TableName=table, Key=key, ConsistentRead=self._consistent_read
        )
        return response.get("Item")

    async def put_item(self, table: str, item: Item) -> None:
        await self._client.put_item(TableName=table, Item=item)

    async def update_item(
        self,
        table: str,
        key: Item,
        *,
        condition: Condition,
        update: Update,
    ) -> None:
        aliases = AttributeAliases()
        condition_expression = condition.to_dynamodb(aliases)
        update_expression = update.to_dynamodb(aliases)
        try:
            await self._client.update_item(
                TableName=table,
                Key=key,
                ConditionExpression=condition_expression,
                UpdateExpression=update_expression,
                ExpressionAttributeNames=aliases.expression_attribute_names(),
            )
        except self._client.exceptions.ConditionalCheckFailedException as exc:
            raise ConditionFailedError(
                f"condition not met for item in table {table!r}"
            ) from exc

    async def delete_item(self, table: str, key: Item) -> None:
        await self._client.delete_item(TableName=table, Key=key)

    async def close(self) -> None:
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
            self._exit_stack = None
