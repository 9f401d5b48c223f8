# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Application configuration via environment variables and .env files."""

from datetime import timedelta

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Expressions always alias attribute names, but the store's TTL reaper and
# some tooling choke on these as plain attribute names.
RESERVED_ATTRIBUTE_NAMES = frozenset({"ttl", "timestamp", "time", "size", "status", "type"})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DYNACACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
    )

    # Table layout
    table_name: str = "cache"
    key_attribute: str = "key"
    value_attribute: str = "value"
    ttl_attribute: str = "ttl_value"
    sliding_attribute: str = "sliding_exp_timespan"
    absolute_attribute: str = "abs_exp_timestamp"

    # Expiration
    default_duration_seconds: int = 86_400  # applied when a caller sets no expiration

    # Sync entry points block on the async core; off unless asked for.
    enable_sync_methods: bool = False

    # Store
    store_backend: str = "memory"  # "memory", "redis" or "dynamodb"
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "dynacache:"
    dynamodb_region: str = ""
    dynamodb_endpoint_url: str = ""

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("store_backend", mode="before")
    @classmethod
    def _normalise_backend(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("default_duration_seconds")
    @classmethod
    def _positive_duration(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("default_duration_seconds must be positive")
        return v

    @model_validator(mode="after")
    def _check_attribute_names(self) -> "Settings":
        names = self.attribute_names()
        for field, name in names.items():
            if not name or not name.strip():
                raise ValueError(f"{field} must not be blank")
            if name.lower() in RESERVED_ATTRIBUTE_NAMES:
                raise ValueError(f"{field}={name!r} is a reserved attribute name")
        if len(set(names.values())) != len(names):
            raise ValueError(f"attribute names must be distinct: {sorted(names.values())}")
        return self

    @property
    def default_duration(self) -> timedelta:
        return timedelta(seconds=self.default_duration_seconds)

    def attribute_names(self) -> dict[str, str]:
        return {
            "key_attribute": self.key_attribute,
            "value_attribute": self.value_attribute,
            "ttl_attribute": self.ttl_attribute,
            "sliding_attribute": self.sliding_attribute,
            "absolute_attribute": self.absolute_attribute,
        }


def get_settings() -> Settings:
    return Settings()
