"""Public SDK surface for dynarepo.

This module provides a stable import path for library users.
It re-exports the repository, key descriptors, and store clients.
"""

from __future__ import annotations

from core.config import DynarepoConfig
from core.errors import (
    DynarepoConfigError,
    DynarepoError,
    EntityNotFoundError,
    InvalidArgumentError,
    StoreError,
    StoreThrottledError,
    StoreUnavailableError,
)
from core.types import CompositeId, StoreKey
from store.crud_repository import CrudRepository
from store.dynamodb_client import DynamoDBStoreClient, TableBinding, create_dynamodb_resource
from store.entity_keys import EntityKeyDescriptor, composite_key_descriptor, hash_key_descriptor
from store.store_client import StoreClient

__all__ = [
    "CompositeId",
    "CrudRepository",
    "DynamoDBStoreClient",
    "DynarepoConfig",
    "DynarepoConfigError",
    "DynarepoError",
    "EntityKeyDescriptor",
    "EntityNotFoundError",
    "InvalidArgumentError",
    "StoreClient",
    "StoreError",
    "StoreKey",
    "StoreThrottledError",
    "StoreUnavailableError",
    "TableBinding",
    "composite_key_descriptor",
    "create_dynamodb_resource",
    "hash_key_descriptor",
]
