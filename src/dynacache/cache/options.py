# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Per-entry expiration options."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, field_validator


class CacheEntryOptions(BaseModel):
    """How long a cache entry lives.

    ``absolute_expiration`` and ``absolute_expiration_relative_to_now``
    are mutually exclusive; supplying both is rejected when the entry is
    written.  ``sliding_expiration`` may be combined with either, in
    which case the absolute value caps how far sliding renewal can go.
    """

    absolute_expiration: datetime | None = None
    absolute_expiration_relative_to_now: timedelta | None = None
    sliding_expiration: timedelta | None = None

    @field_validator("absolute_expiration_relative_to_now", "sliding_expiration")
    @classmethod
    def _positive(cls, v: timedelta | None) -> timedelta | None:
        if v is not None and v <= timedelta(0):
            raise ValueError("expiration durations must be positive")
        return v

    @field_validator("sliding_expiration")
    @classmethod
    def _whole_second_window(cls, v: timedelta | None) -> timedelta | None:
        # Spans are stored in whole seconds; a zero span would never slide.
        if v is not None and round(v.total_seconds()) < 1:
            raise ValueError("sliding_expiration must round to at least one second")
        return v

    @property
    def has_expiration(self) -> bool:
        return (
            self.absolute_expiration is not None
            or self.absolute_expiration_relative_to_now is not None
            or self.sliding_expiration is not None
        )
