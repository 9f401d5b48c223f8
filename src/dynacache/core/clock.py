# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Injectable time sources.

All expiration arithmetic works in whole unix seconds, so clocks expose
both the aware ``datetime`` and its floored epoch value.
"""

from __future__ import annotations

import abc
import math
from datetime import UTC, datetime, timedelta


class Clock(abc.ABC):
    """Source of the current time."""

    @abc.abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a timezone-aware UTC datetime."""

    def unix_seconds(self) -> int:
        return math.floor(self.now().timestamp())


class SystemClock(Clock):
    """Wall-clock time."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FrozenClock(Clock):
    """A clock that only moves when told to.

    Args:
        start: Initial instant, or unix seconds.  Defaults to the epoch.
    """

    def __init__(self, start: datetime | int | float = 0) -> None:
        self._now = _coerce(start)

    def now(self) -> datetime:
        return self._now

    def set(self, instant: datetime | int | float) -> None:
        self._now = _coerce(instant)

    def advance(self, seconds: float | timedelta) -> datetime:
        if not isinstance(seconds, timedelta):
            seconds = timedelta(seconds=seconds)
        self._now = self._now + seconds
        return self._now


def _coerce(instant: datetime | int | float) -> datetime:
    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            return instant.replace(tzinfo=UTC)
        return instant.astimezone(UTC)
    return datetime.fromtimestamp(instant, UTC)
