# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Expiration arithmetic and the sliding refresh protocol.

All values are whole unix seconds.  An entry's ``ttl`` is the instant it
stops being readable.  With sliding expiration the first window is
always ``now + span``; each refresh adds ``span`` to the stored ``ttl``
in place at the store, as long as the entry has no absolute ceiling or
its ``ttl`` is still below that ceiling.

The ceiling gates the decision to refresh, it does not clamp the result:
a refresh issued one second before the ceiling still adds a full span.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta

from dynacache.cache.entry import AttributeNames
from dynacache.core.exceptions import ConfigurationConflictError, InternalInconsistencyError
from dynacache.store.expressions import (
    AttributeExists,
    AttributeNotExists,
    Condition,
    Increment,
    LessThan,
    Update,
)


def to_unix_seconds(instant: datetime) -> int:
    """Floor *instant* to unix seconds.  Naive datetimes are read as UTC."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return math.floor(instant.timestamp())


def sliding_span_seconds(duration: timedelta | None) -> int | None:
    """Round a sliding duration to the nearest whole second (half to even)."""
    if duration is None:
        return None
    return round(duration.total_seconds())


def absolute_expiration_timestamp(
    now: datetime,
    absolute: datetime | None,
    relative: timedelta | None,
) -> int | None:
    """Resolve the absolute ceiling from either form of absolute expiration.

    Raises:
        ConfigurationConflictError: Both *absolute* and *relative* are set.
    """
    if absolute is not None and relative is not None:
        raise ConfigurationConflictError(
            "absolute_expiration and absolute_expiration_relative_to_now "
            "cannot be set at the same time"
        )
    if absolute is not None:
        return to_unix_seconds(absolute)
    if relative is not None:
        return to_unix_seconds(now + relative)
    return None


def initial_ttl(now: int, sliding_span: int | None, absolute_timestamp: int | None) -> int:
    if sliding_span is not None:
        return now + sliding_span
    if absolute_timestamp is not None:
        return absolute_timestamp
    raise InternalInconsistencyError("cannot compute an initial TTL without any expiration")


def is_expired(ttl: int, now: int) -> bool:
    return ttl < now


def should_refresh(ttl: int, now: int, sliding_span: int) -> bool:
    """Renew once half the sliding window or less remains."""
    return ttl - now <= sliding_span // 2


def refresh_condition(names: AttributeNames) -> Condition:
    """Entry slides, and either has no ceiling or has not reached it."""
    return AttributeExists(names.sliding) & (
        AttributeNotExists(names.absolute) | LessThan(names.ttl, names.absolute)
    )


def refresh_update(names: AttributeNames) -> Update:
    return Increment(names.ttl, names.sliding)
