"""dynarepo exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Repository callers can tell argument, lookup, and store failures apart.
"""

from __future__ import annotations


class DynarepoError(Exception):
    """Base exception for all dynarepo failures."""


class DynarepoConfigError(DynarepoError):
    """Raised for invalid runtime configuration."""


class InvalidArgumentError(DynarepoError):
    """Raised when a required identifier or entity is missing or malformed."""


class EntityNotFoundError(DynarepoError):
    """Raised when an entity expected to exist is not in the store."""

    def __init__(self, entity_type: type, entity_id: object) -> None:
        super().__init__(f"No {entity_type.__name__} entity with id {entity_id!r} exists!")
        self.entity_type = entity_type
        self.entity_id = entity_id


class StoreError(DynarepoError):
    """Raised for failures reported by the backing key-value store."""


class StoreUnavailableError(StoreError):
    """Raised when the store cannot serve a request."""


class StoreThrottledError(StoreUnavailableError):
    """Raised when the store rejects requests for exceeding throughput."""
