"""Entity key descriptors.

This module maps caller identifiers onto store key components.
A descriptor is built once per entity type and never changes shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from operator import itemgetter
from typing import Any, Callable

from core.errors import InvalidArgumentError

KeyDerivation = Callable[[Any], Any]


def _identity(entity_id: Any) -> Any:
    return entity_id


@dataclass(frozen=True)
class EntityKeyDescriptor:
    """Per-type strategy for deriving store key components.

    Derivation functions must be pure: the repository calls them from
    concurrent callers and batch loops without synchronization.

    Attributes:
        entity_type: Runtime type token used to group batch requests.
        hash_key_of: Identifier -> partition key value.
        range_key_of: Identifier -> sort key value, or None for hash-only types.
    """

    entity_type: type
    hash_key_of: KeyDerivation
    range_key_of: KeyDerivation | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.entity_type, type):
            raise InvalidArgumentError(
                f"Entity type must be a class, got {self.entity_type!r}."
            )
        if not callable(self.hash_key_of):
            raise InvalidArgumentError(
                f"Hash key derivation for {self.entity_type.__name__} must be callable."
            )
        if self.range_key_of is not None and not callable(self.range_key_of):
            raise InvalidArgumentError(
                f"Range key derivation for {self.entity_type.__name__} must be callable."
            )

    @property
    def is_range_key_aware(self) -> bool:
        """Whether items of this type are addressed by hash and range key."""
        return self.range_key_of is not None

    @property
    def entity_name(self) -> str:
        return self.entity_type.__name__

    def hash_key(self, entity_id: Any) -> Any:
        """Derive the partition key component of an identifier."""
        return self.hash_key_of(entity_id)

    def range_key(self, entity_id: Any) -> Any:
        """Derive the sort key component of an identifier.

        Raises:
            InvalidArgumentError: If the type has no range key.
        """
        if self.range_key_of is None:
            raise InvalidArgumentError(f"{self.entity_name} is not range-key aware.")
        return self.range_key_of(entity_id)


def hash_key_descriptor(
    entity_type: type,
    hash_key_of: KeyDerivation = _identity,
) -> EntityKeyDescriptor:
    """Build a descriptor for a hash-only entity type.

    Args:
        entity_type: Entity class.
        hash_key_of: Identifier -> partition key; the identifier itself by default.

    Returns:
        Hash-only key descriptor.
    """
    return EntityKeyDescriptor(entity_type=entity_type, hash_key_of=hash_key_of)


def composite_key_descriptor(
    entity_type: type,
    hash_key_of: KeyDerivation = itemgetter(0),
    range_key_of: KeyDerivation = itemgetter(1),
) -> EntityKeyDescriptor:
    """Build a descriptor for a hash+range entity type.

    The defaults read ``(hash, range)`` pairs, so both plain tuples and
    ``CompositeId`` values work as identifiers.

    Args:
        entity_type: Entity class.
        hash_key_of: Identifier -> partition key.
        range_key_of: Identifier -> sort key.

    Returns:
        Range-key-aware key descriptor.
    """
    return EntityKeyDescriptor(
        entity_type=entity_type,
        hash_key_of=hash_key_of,
        range_key_of=range_key_of,
    )
