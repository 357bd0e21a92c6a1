"""Unit tests for entity key descriptors."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from core.errors import InvalidArgumentError
from core.types import CompositeId
from store.entity_keys import EntityKeyDescriptor, composite_key_descriptor, hash_key_descriptor


@dataclass(frozen=True)
class ReadingId:
    sensor: str
    taken_at: int


class Reading:
    pass


def test_hash_descriptor_uses_identifier_as_hash_key() -> None:
    """Default hash derivation should return the identifier itself."""
    descriptor = hash_key_descriptor(Reading)

    assert not descriptor.is_range_key_aware and descriptor.hash_key("r-1") == "r-1"


def test_hash_descriptor_rejects_range_key_request() -> None:
    """Hash-only descriptors should refuse to derive a range key."""
    descriptor = hash_key_descriptor(Reading)

    with pytest.raises(InvalidArgumentError):
        descriptor.range_key("r-1")


def test_composite_descriptor_reads_pairs() -> None:
    """Default composite derivation should read (hash, range) pairs."""
    descriptor = composite_key_descriptor(Reading)
    entity_id = CompositeId("sensor-a", 42)

    assert descriptor.is_range_key_aware and (
        descriptor.hash_key(entity_id),
        descriptor.range_key(entity_id),
    ) == ("sensor-a", 42)


def test_composite_descriptor_accepts_custom_derivations() -> None:
    """Custom derivations should map structured identifiers."""
    descriptor = composite_key_descriptor(
        Reading,
        hash_key_of=lambda entity_id: entity_id.sensor,
        range_key_of=lambda entity_id: entity_id.taken_at,
    )
    entity_id = ReadingId(sensor="sensor-b", taken_at=7)

    assert descriptor.hash_key(entity_id) == "sensor-b" and descriptor.range_key(entity_id) == 7


def test_descriptor_rejects_non_type_entity() -> None:
    """Entity type tokens must be classes."""
    with pytest.raises(InvalidArgumentError):
        EntityKeyDescriptor(entity_type="Reading", hash_key_of=str)  # type: ignore[arg-type]


def test_descriptor_rejects_non_callable_range_derivation() -> None:
    """Range derivation must be callable when provided."""
    with pytest.raises(InvalidArgumentError):
        EntityKeyDescriptor(entity_type=Reading, hash_key_of=str, range_key_of="taken_at")  # type: ignore[arg-type]


def test_descriptor_range_awareness_is_fixed() -> None:
    """Descriptors should be immutable after construction."""
    descriptor = hash_key_descriptor(Reading)

    with pytest.raises(AttributeError):
        descriptor.range_key_of = lambda entity_id: entity_id  # type: ignore[misc]
