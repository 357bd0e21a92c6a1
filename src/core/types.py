"""Shared typed models.

This module defines the immutable key values passed between the
repository core and store clients.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple


@dataclass(frozen=True)
class StoreKey:
    """Store-native key for one item.

    Attributes:
        hash_key: Partition key component.
        range_key: Sort key component; None for hash-only tables.
    """

    hash_key: Any
    range_key: Any = None

    @property
    def has_range_key(self) -> bool:
        """Whether this key carries a sort key component."""
        return self.range_key is not None

    def as_tuple(self) -> tuple[Any, ...]:
        """Return ``(hash,)`` or ``(hash, range)``."""
        if self.has_range_key:
            return (self.hash_key, self.range_key)
        return (self.hash_key,)


class CompositeId(NamedTuple):
    """Ready-made identifier for hash+range keyed entities."""

    hash_key: Any
    range_key: Any
