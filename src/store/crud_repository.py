"""Generic CRUD repository over a key-value store.

This module turns caller identifiers into store keys and groups
per-item work into batch requests keyed by entity type.
"""

from __future__ import annotations

from typing import Any, Generic, Iterable, TypeVar

from core.errors import EntityNotFoundError, InvalidArgumentError
from core.logging_config import get_logger
from core.types import StoreKey
from store.entity_keys import EntityKeyDescriptor
from store.store_client import StoreClient

_LOGGER = get_logger(__name__)

EntityT = TypeVar("EntityT")


class CrudRepository(Generic[EntityT]):
    """CRUD operations for one entity type.

    The repository holds no entity state between calls; every operation
    is a fresh round trip through the injected store client. Store
    errors propagate unchanged.
    """

    def __init__(self, key_descriptor: EntityKeyDescriptor, store_client: StoreClient) -> None:
        """Create a repository.

        Args:
            key_descriptor: Key derivation strategy for the entity type.
            store_client: Backing store client.

        Raises:
            InvalidArgumentError: If either collaborator is missing.
        """
        if key_descriptor is None:
            raise InvalidArgumentError("Key descriptor must not be None.")
        if store_client is None:
            raise InvalidArgumentError("Store client must not be None.")
        self._keys = key_descriptor
        self._client = store_client
        self._entity_type = key_descriptor.entity_type

    @property
    def entity_type(self) -> type:
        return self._entity_type

    @property
    def key_descriptor(self) -> EntityKeyDescriptor:
        return self._keys

    def load(self, entity_id: Any) -> EntityT | None:
        """Load one entity by identifier.

        Args:
            entity_id: Caller identifier.

        Returns:
            The entity, or None when no item has this key.
        """
        key = self._build_key(entity_id)
        _LOGGER.debug("entity_load_requested", entity_type=self._keys.entity_name, key=repr(key))
        return self._client.load(self._entity_type, key)

    def load_many(self, entity_ids: Iterable[Any]) -> list[EntityT]:
        """Load every existing entity among the given identifiers.

        Missing identifiers are skipped. Result order follows the store's
        batch response, not the input order.

        Args:
            entity_ids: Caller identifiers.

        Returns:
            Found entities of this repository's type.
        """
        keys = [self._build_key(entity_id) for entity_id in entity_ids]
        keys_by_type = {self._entity_type: keys}
        _LOGGER.info(
            "batch_load_requested",
            entity_type=self._keys.entity_name,
            key_count=len(keys),
        )
        found_by_type = self._client.batch_load(keys_by_type)
        return list(found_by_type.get(self._entity_type) or [])

    def save(self, entity: EntityT) -> EntityT:
        """Upsert one entity and return the same object."""
        self._client.save(entity)
        _LOGGER.debug("entity_saved", entity_type=self._keys.entity_name)
        return entity

    def save_many(self, entities: Iterable[EntityT]) -> list[EntityT]:
        """Upsert entities in a single batch write.

        Args:
            entities: Entities to write.

        Returns:
            The written entities, in input order.
        """
        entity_list = list(entities)
        self._client.batch_save(entity_list)
        _LOGGER.info(
            "entities_saved",
            entity_type=self._keys.entity_name,
            entity_count=len(entity_list),
        )
        return entity_list

    def exists(self, entity_id: Any) -> bool:
        """Return whether an entity with this identifier is stored.

        Raises:
            InvalidArgumentError: If entity_id is None.
        """
        if entity_id is None:
            raise InvalidArgumentError("The given id must not be None!")
        return self.load(entity_id) is not None

    def find_all(self) -> list[EntityT]:
        """Scan and return every stored entity of this type."""
        entities = list(self._client.scan(self._entity_type))
        _LOGGER.info(
            "entities_scanned",
            entity_type=self._keys.entity_name,
            entity_count=len(entities),
        )
        return entities

    def count(self) -> int:
        """Return the exact number of stored entities, counted by scanning."""
        return int(self._client.count(self._entity_type))

    def delete_by_id(self, entity_id: Any) -> None:
        """Delete the entity with this identifier.

        The entity is read first so a missing item is reported instead of
        silently ignored. The read and the delete are two separate round
        trips; a concurrent writer may change the item in between.

        Args:
            entity_id: Caller identifier.

        Raises:
            InvalidArgumentError: If entity_id is None.
            EntityNotFoundError: If no item has this key.
        """
        if entity_id is None:
            raise InvalidArgumentError("The given id must not be None!")
        entity = self.load(entity_id)
        if entity is None:
            raise EntityNotFoundError(self._entity_type, entity_id)
        self._client.delete(entity)
        _LOGGER.debug("entity_deleted", entity_type=self._keys.entity_name)

    def delete_entity(self, entity: EntityT) -> None:
        """Delete an entity without checking that it exists.

        Raises:
            InvalidArgumentError: If entity is None.
        """
        if entity is None:
            raise InvalidArgumentError("The entity must not be None!")
        self._client.delete(entity)
        _LOGGER.debug("entity_deleted", entity_type=self._keys.entity_name)

    def delete_many(self, entities: Iterable[EntityT]) -> None:
        """Delete entities in a single batch request.

        Items that are not stored are ignored by the store.

        Raises:
            InvalidArgumentError: If entities is None.
        """
        if entities is None:
            raise InvalidArgumentError("The given iterable of entities must not be None!")
        entity_list = list(entities)
        self._client.batch_delete(entity_list)
        _LOGGER.info(
            "entities_deleted",
            entity_type=self._keys.entity_name,
            entity_count=len(entity_list),
        )

    def delete_all(self) -> int:
        """Delete every entity of this type.

        Materializes a full scan in memory before issuing one batch delete,
        so cost grows with table size.

        Returns:
            Number of entities submitted for deletion.
        """
        entities = self.find_all()
        self.delete_many(entities)
        return len(entities)

    def _build_key(self, entity_id: Any) -> StoreKey:
        if self._keys.is_range_key_aware:
            range_key = self._keys.range_key(entity_id)
            if range_key is None:
                raise InvalidArgumentError(
                    f"{self._keys.entity_name} id {entity_id!r} has no range key value."
                )
            return StoreKey(hash_key=self._keys.hash_key(entity_id), range_key=range_key)
        return StoreKey(hash_key=self._keys.hash_key(entity_id))
