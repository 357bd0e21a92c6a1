"""DynamoDB store client.

This module implements the store client contract on the boto3
DynamoDB resource API, including batch chunking and pagination.
"""

from __future__ import annotations

from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Mapping

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from core.config import DynarepoConfig
from core.constants import BATCH_GET_MAX_KEYS, THROTTLING_ERROR_CODES
from core.errors import InvalidArgumentError, StoreThrottledError, StoreUnavailableError
from core.logging_config import get_logger
from core.types import StoreKey

_LOGGER = get_logger(__name__)


def _as_item(entity: Any) -> dict[str, Any]:
    return dict(entity)


def _as_entity(item: dict[str, Any]) -> Any:
    return item


@dataclass(frozen=True)
class TableBinding:
    """Binds one entity type to a DynamoDB table.

    Attributes:
        table_name: Physical table name.
        hash_key_attribute: Partition key attribute name.
        range_key_attribute: Sort key attribute name for composite tables.
        to_item: Entity -> item mapping written to the table.
        from_item: Item -> entity mapping read from the table.
    """

    table_name: str
    hash_key_attribute: str
    range_key_attribute: str | None = None
    to_item: Callable[[Any], dict[str, Any]] = field(default=_as_item)
    from_item: Callable[[dict[str, Any]], Any] = field(default=_as_entity)

    def key_for(self, key: StoreKey) -> dict[str, Any]:
        """Build a DynamoDB key map from a store key.

        Raises:
            InvalidArgumentError: If the key shape does not match the table.
        """
        if self.range_key_attribute is None:
            if key.has_range_key:
                raise InvalidArgumentError(
                    f"Table {self.table_name} has no range key, got key {key.as_tuple()!r}."
                )
            return {self.hash_key_attribute: key.hash_key}
        if not key.has_range_key:
            raise InvalidArgumentError(
                f"Table {self.table_name} requires a range key, got key {key.as_tuple()!r}."
            )
        return {
            self.hash_key_attribute: key.hash_key,
            self.range_key_attribute: key.range_key,
        }

    def key_of_item(self, item: Mapping[str, Any]) -> dict[str, Any]:
        """Extract the DynamoDB key map from a full item."""
        key = {self.hash_key_attribute: item[self.hash_key_attribute]}
        if self.range_key_attribute is not None:
            key[self.range_key_attribute] = item[self.range_key_attribute]
        return key


def create_dynamodb_resource(config: DynarepoConfig) -> Any:
    """Create a boto3 DynamoDB service resource.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 DynamoDB resource.
    """
    session_kwargs: dict[str, str] = {}
    if config.aws_profile:
        session_kwargs["profile_name"] = config.aws_profile
    if config.aws_region:
        session_kwargs["region_name"] = config.aws_region
    session = boto3.session.Session(**session_kwargs)
    resource_kwargs: dict[str, str] = {}
    if config.endpoint_url:
        resource_kwargs["endpoint_url"] = config.endpoint_url
    return session.resource("dynamodb", **resource_kwargs)


class DynamoDBStoreClient:
    """Store client backed by DynamoDB tables.

    Each entity type must be registered with a ``TableBinding``.
    Items pass through the binding's ``to_item``/``from_item`` hooks;
    the defaults treat entities as plain mappings.
    """

    def __init__(
        self,
        resource: Any,
        bindings: Mapping[type, TableBinding],
        config: DynarepoConfig | None = None,
    ) -> None:
        self._resource = resource
        self._bindings = dict(bindings)
        self._config = config or DynarepoConfig()

    def load(self, entity_type: type, key: StoreKey) -> Any | None:
        """Point lookup by key; None when the item is missing."""
        binding = self._binding(entity_type)
        with _translate_store_errors("get_item", binding.table_name):
            response = self._table(binding).get_item(Key=binding.key_for(key))
        item = response.get("Item")
        if item is None:
            return None
        return binding.from_item(item)

    def batch_load(
        self,
        keys_by_type: Mapping[type, list[StoreKey]],
    ) -> dict[type, list[Any]]:
        """Load many keys across entity types with BatchGetItem.

        Args:
            keys_by_type: Keys to fetch, grouped by entity type.

        Returns:
            Found entities grouped by entity type; every requested type is present.

        Raises:
            StoreThrottledError: If keys stay unprocessed after all attempts.
        """
        found: dict[type, list[Any]] = {entity_type: [] for entity_type in keys_by_type}
        key_binding_by_table: dict[str, TableBinding] = {}
        type_by_key: dict[tuple[str, tuple[Any, ...]], type] = {}
        pending: list[tuple[str, dict[str, Any]]] = []
        for entity_type, keys in keys_by_type.items():
            binding = self._binding(entity_type)
            key_binding_by_table.setdefault(binding.table_name, binding)
            for key in keys:
                key_map = binding.key_for(key)
                type_by_key[(binding.table_name, _key_signature(key_map))] = entity_type
                pending.append((binding.table_name, key_map))
        for start in range(0, len(pending), BATCH_GET_MAX_KEYS):
            chunk = pending[start : start + BATCH_GET_MAX_KEYS]
            for table_name, items in self._batch_get_chunk(chunk):
                key_binding = key_binding_by_table[table_name]
                for item in items:
                    # Types sharing a table share its key attributes.
                    signature = _key_signature(key_binding.key_of_item(item))
                    entity_type = type_by_key[(table_name, signature)]
                    found[entity_type].append(self._bindings[entity_type].from_item(item))
        return found

    def save(self, entity: Any) -> None:
        binding = self._binding(type(entity))
        with _translate_store_errors("put_item", binding.table_name):
            self._table(binding).put_item(Item=binding.to_item(entity))

    def batch_save(self, entities: list[Any]) -> None:
        """Write entities with one batch writer per table."""
        for binding, group in self._group_by_binding(entities):
            with _translate_store_errors("batch_write_item", binding.table_name):
                with self._table(binding).batch_writer() as writer:
                    for entity in group:
                        writer.put_item(Item=binding.to_item(entity))

    def delete(self, entity: Any) -> None:
        binding = self._binding(type(entity))
        key = binding.key_of_item(binding.to_item(entity))
        with _translate_store_errors("delete_item", binding.table_name):
            self._table(binding).delete_item(Key=key)

    def batch_delete(self, entities: list[Any]) -> None:
        """Delete entities with one batch writer per table."""
        for binding, group in self._group_by_binding(entities):
            with _translate_store_errors("batch_write_item", binding.table_name):
                with self._table(binding).batch_writer() as writer:
                    for entity in group:
                        writer.delete_item(Key=binding.key_of_item(binding.to_item(entity)))

    def scan(self, entity_type: type) -> list[Any]:
        """Return every item in the entity's table, following pagination."""
        binding = self._binding(entity_type)
        entities: list[Any] = []
        for page in self._scan_pages(binding):
            entities.extend(binding.from_item(item) for item in page.get("Items", []))
        return entities

    def count(self, entity_type: type) -> int:
        """Return the exact item count of the entity's table by scanning."""
        binding = self._binding(entity_type)
        return sum(page.get("Count", 0) for page in self._scan_pages(binding, Select="COUNT"))

    def _scan_pages(self, binding: TableBinding, **scan_kwargs: Any) -> Iterator[dict[str, Any]]:
        table = self._table(binding)
        while True:
            with _translate_store_errors("scan", binding.table_name):
                page = table.scan(**scan_kwargs)
            yield page
            last_key = page.get("LastEvaluatedKey")
            if not last_key:
                return
            scan_kwargs["ExclusiveStartKey"] = last_key

    def _batch_get_chunk(
        self,
        chunk: list[tuple[str, dict[str, Any]]],
    ) -> Iterator[tuple[str, list[dict[str, Any]]]]:
        """Fetch one chunk of keys, re-requesting unprocessed keys."""
        request: dict[str, Any] = {}
        for table_name, key in chunk:
            request.setdefault(table_name, {"Keys": []})["Keys"].append(key)
        attempts = 0
        while request:
            attempts += 1
            with _translate_store_errors("batch_get_item", ",".join(sorted(request))):
                response = self._resource.batch_get_item(RequestItems=request)
            for table_name, items in response.get("Responses", {}).items():
                yield table_name, items
            request = response.get("UnprocessedKeys") or {}
            if not request:
                return
            if attempts >= self._config.max_unprocessed_attempts:
                raise StoreThrottledError(
                    f"BatchGetItem left keys unprocessed for tables {sorted(request)} "
                    f"after {attempts} attempts. Reduce request rate or raise "
                    "DYNAREPO_MAX_UNPROCESSED_ATTEMPTS."
                )
            _LOGGER.warning(
                "unprocessed_keys_retry",
                attempt=attempts,
                tables=sorted(request),
                key_count=sum(len(entry.get("Keys", [])) for entry in request.values()),
            )

    def _group_by_binding(self, entities: list[Any]) -> list[tuple[TableBinding, list[Any]]]:
        groups: dict[type, list[Any]] = defaultdict(list)
        for entity in entities:
            groups[type(entity)].append(entity)
        return [(self._binding(entity_type), group) for entity_type, group in groups.items()]

    def _binding(self, entity_type: type) -> TableBinding:
        binding = self._bindings.get(entity_type)
        if binding is None:
            raise InvalidArgumentError(
                f"No table binding registered for entity type {entity_type.__name__}."
            )
        return binding

    def _table(self, binding: TableBinding) -> Any:
        return self._resource.Table(binding.table_name)


@contextmanager
def _translate_store_errors(operation: str, table_name: str) -> Iterator[None]:
    """Map botocore failures onto dynarepo store errors.

    Args:
        operation: DynamoDB operation name for the message.
        table_name: Target table name(s).

    Raises:
        StoreThrottledError: For throughput and rate-limit rejections.
        StoreUnavailableError: For any other client or transport failure.
    """
    try:
        yield
    except ClientError as error:
        code = error.response.get("Error", {}).get("Code", "")
        if code in THROTTLING_ERROR_CODES:
            raise StoreThrottledError(
                f"DynamoDB throttled {operation} on {table_name}: {code}."
            ) from error
        raise StoreUnavailableError(
            f"DynamoDB {operation} on {table_name} failed: {error}."
        ) from error
    except BotoCoreError as error:
        raise StoreUnavailableError(
            f"DynamoDB {operation} on {table_name} failed: {error}. "
            "Check AWS credentials, region, and endpoint."
        ) from error


def _key_signature(key_map: Mapping[str, Any]) -> tuple[Any, ...]:
    """Hashable form of a DynamoDB key map."""
    return tuple(sorted(key_map.items()))
