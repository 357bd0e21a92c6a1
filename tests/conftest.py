"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


class RecordingStoreClient:
    """In-memory store client that records every call it receives."""

    def __init__(self, key_of: Callable[[Any], tuple[Any, ...]]) -> None:
        self.items: dict[tuple[Any, ...], Any] = {}
        self.calls: list[tuple[str, Any]] = []
        self._key_of = key_of

    def put(self, *entities: Any) -> None:
        for entity in entities:
            self.items[self._key_of(entity)] = entity

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def load(self, entity_type: type, key: Any) -> Any:
        self.calls.append(("load", key))
        return self.items.get(key.as_tuple())

    def batch_load(self, keys_by_type: Any) -> dict[type, list[Any]]:
        self.calls.append(("batch_load", dict(keys_by_type)))
        return {
            entity_type: [
                self.items[key.as_tuple()] for key in keys if key.as_tuple() in self.items
            ]
            for entity_type, keys in keys_by_type.items()
        }

    def save(self, entity: Any) -> None:
        self.calls.append(("save", entity))
        self.put(entity)

    def batch_save(self, entities: list[Any]) -> None:
        self.calls.append(("batch_save", list(entities)))
        self.put(*entities)

    def delete(self, entity: Any) -> None:
        self.calls.append(("delete", entity))
        self.items.pop(self._key_of(entity), None)

    def batch_delete(self, entities: list[Any]) -> None:
        self.calls.append(("batch_delete", list(entities)))
        for entity in entities:
            self.items.pop(self._key_of(entity), None)

    def scan(self, entity_type: type) -> list[Any]:
        self.calls.append(("scan", entity_type))
        return [item for item in self.items.values() if isinstance(item, entity_type)]

    def count(self, entity_type: type) -> int:
        self.calls.append(("count", entity_type))
        return len([item for item in self.items.values() if isinstance(item, entity_type)])


@pytest.fixture
def recording_store() -> Callable[[Callable[[Any], tuple[Any, ...]]], RecordingStoreClient]:
    """Factory for recording store clients keyed by the given function."""
    return RecordingStoreClient
