"""Store client contract.

This module declares the key-value store operations the repository
core depends on. Concrete clients are injected at construction.
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from core.types import StoreKey


class StoreClient(Protocol):
    """Operations a backing key-value store must provide.

    Every method may raise ``StoreUnavailableError`` or
    ``StoreThrottledError``; callers receive them unchanged.
    """

    def load(self, entity_type: type, key: StoreKey) -> Any | None: ...

    def batch_load(
        self,
        keys_by_type: Mapping[type, list[StoreKey]],
    ) -> Mapping[type, list[Any]]: ...

    def save(self, entity: Any) -> None: ...

    def batch_save(self, entities: list[Any]) -> None: ...

    def delete(self, entity: Any) -> None: ...

    def batch_delete(self, entities: list[Any]) -> None: ...

    def scan(self, entity_type: type) -> list[Any]: ...

    def count(self, entity_type: type) -> int: ...
