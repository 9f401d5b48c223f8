# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for dynacache."""


class DynacacheError(Exception):
    """Base exception for all dynacache errors."""


class ConfigurationError(DynacacheError):
    """Invalid or missing configuration."""


class ConfigurationConflictError(ConfigurationError):
    """Mutually exclusive expiration options were supplied together."""


class InvalidArgumentError(DynacacheError, ValueError):
    """A cache operation was called with a blank or malformed argument."""


class InternalInconsistencyError(DynacacheError):
    """An internal invariant was violated (should be unreachable)."""


class SyncMethodsDisabledError(DynacacheError, NotImplementedError):
    """A blocking method was called while sync methods are disabled."""


class StoreError(DynacacheError):
    """Base class for errors raised by a store client itself."""


class ConditionFailedError(StoreError):
    """A conditional write was rejected because its condition did not hold.

    This is a signal, not a fault: callers decide whether it matters.
    """
