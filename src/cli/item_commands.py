"""Item command handlers for dynarepo CLI."""

from __future__ import annotations

import argparse
from decimal import Decimal
import json
from typing import Any

from core.errors import EntityNotFoundError, InvalidArgumentError
from core.types import CompositeId
from store.crud_repository import CrudRepository


def run_get_command(repository: CrudRepository[Any], args: argparse.Namespace) -> int:
    """Print one item, or exit non-zero when it is missing."""
    entity_id = parse_entity_id(args)
    item = repository.load(entity_id)
    if item is None:
        print(f"not_found={entity_id!r}")
        return 1
    print(render_item(item))
    return 0


def run_scan_command(repository: CrudRepository[Any], args: argparse.Namespace) -> int:
    """Print every item as one JSON object per line."""
    for item in repository.find_all():
        print(render_item(item))
    return 0


def run_count_command(repository: CrudRepository[Any], args: argparse.Namespace) -> int:
    print(repository.count())
    return 0


def run_delete_command(repository: CrudRepository[Any], args: argparse.Namespace) -> int:
    """Delete one item that must exist."""
    entity_id = parse_entity_id(args)
    try:
        repository.delete_by_id(entity_id)
    except EntityNotFoundError as error:
        print(f"not_found={error}")
        return 1
    print(f"deleted={entity_id!r}")
    return 0


def run_purge_command(repository: CrudRepository[Any], args: argparse.Namespace) -> int:
    deleted_count = repository.delete_all()
    print(f"deleted_count={deleted_count}")
    return 0


def parse_entity_id(args: argparse.Namespace) -> Any:
    """Build the identifier named by --hash/--range.

    Args:
        args: Parsed CLI args.

    Returns:
        A scalar hash value or a ``CompositeId``.

    Raises:
        InvalidArgumentError: If --range is missing or unexpected.
    """
    hash_value = _parse_key_value(args.hash, args.hash_type)
    if args.range_key_attr:
        if args.range is None:
            raise InvalidArgumentError("--range is required for tables with a range key.")
        return CompositeId(hash_value, _parse_key_value(args.range, args.range_type))
    if args.range is not None:
        raise InvalidArgumentError("--range given but the table has no --range-key-attr.")
    return hash_value


def render_item(item: Any) -> str:
    """Render a DynamoDB item as a compact JSON line."""
    return json.dumps(item, default=_json_default, sort_keys=True)


def _parse_key_value(raw_value: str, key_type: str) -> Any:
    if key_type == "N":
        try:
            return Decimal(raw_value)
        except ArithmeticError as error:
            raise InvalidArgumentError(
                f"Invalid numeric key value '{raw_value}'."
            ) from error
    return raw_value


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)
