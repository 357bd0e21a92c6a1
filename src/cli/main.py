"""dynarepo CLI entry points.
This module exposes item commands for a single DynamoDB table.
It maps argparse commands onto repository calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from typing import Any, Sequence

from cli.item_commands import (
    run_count_command,
    run_delete_command,
    run_get_command,
    run_purge_command,
    run_scan_command,
)
from core.config import DynarepoConfig
from core.errors import DynarepoError, StoreError
from store.crud_repository import CrudRepository
from store.dynamodb_client import DynamoDBStoreClient, TableBinding, create_dynamodb_resource
from store.entity_keys import composite_key_descriptor, hash_key_descriptor


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="dynarepo", description="dynarepo table CLI")
    parser.add_argument("--region", help="Override DYNAREPO_AWS_REGION for this command")
    parser.add_argument("--endpoint-url", help="Override DYNAREPO_ENDPOINT_URL for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_get_command(subparsers)
    _add_scan_command(subparsers)
    _add_count_command(subparsers)
    _add_delete_command(subparsers)
    _add_purge_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the dynarepo CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        repository = build_repository(args)
        if args.command == "get":
            return run_get_command(repository, args)
        if args.command == "scan":
            return run_scan_command(repository, args)
        if args.command == "count":
            return run_count_command(repository, args)
        if args.command == "delete":
            return run_delete_command(repository, args)
        if args.command == "purge":
            return run_purge_command(repository, args)
    except StoreError as error:
        print(f"store_error={error}")
        return 1
    except DynarepoError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def build_repository(args: argparse.Namespace) -> CrudRepository[dict[str, Any]]:
    """Build a dict-item repository for the table named on the command line.

    Args:
        args: Parsed CLI args.

    Returns:
        Repository over plain dict items.
    """
    config = _build_config(args)
    binding = TableBinding(
        table_name=config.table_name(args.table),
        hash_key_attribute=args.hash_key_attr,
        range_key_attribute=args.range_key_attr,
    )
    store_client = DynamoDBStoreClient(
        create_dynamodb_resource(config),
        {dict: binding},
        config,
    )
    if args.range_key_attr:
        return CrudRepository(composite_key_descriptor(dict), store_client)
    return CrudRepository(hash_key_descriptor(dict), store_client)


def _build_config(args: argparse.Namespace) -> DynarepoConfig:
    """Build config with optional CLI overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Runtime config.
    """
    config = DynarepoConfig.from_env()
    if args.region:
        config = replace(config, aws_region=args.region)
    if args.endpoint_url:
        config = replace(config, endpoint_url=args.endpoint_url)
    return config


def _add_table_arguments(parser: argparse.ArgumentParser) -> None:
    """Register arguments shared by every table command."""
    parser.add_argument("--table", required=True, help="Logical table name")
    parser.add_argument("--hash-key-attr", required=True, help="Partition key attribute name")
    parser.add_argument("--range-key-attr", help="Sort key attribute name for composite tables")


def _add_key_arguments(parser: argparse.ArgumentParser) -> None:
    """Register arguments naming one item."""
    parser.add_argument("--hash", required=True, help="Partition key value")
    parser.add_argument("--range", help="Sort key value")
    parser.add_argument(
        "--hash-type",
        choices=("S", "N"),
        default="S",
        help="Partition key type: S (string) or N (number)",
    )
    parser.add_argument(
        "--range-type",
        choices=("S", "N"),
        default="S",
        help="Sort key type: S (string) or N (number)",
    )


def _add_get_command(subparsers: Any) -> None:
    """Register get subcommand."""
    parser = subparsers.add_parser("get", help="Print one item as JSON")
    _add_table_arguments(parser)
    _add_key_arguments(parser)


def _add_scan_command(subparsers: Any) -> None:
    """Register scan subcommand."""
    parser = subparsers.add_parser("scan", help="Print every item as JSON lines")
    _add_table_arguments(parser)


def _add_count_command(subparsers: Any) -> None:
    """Register count subcommand."""
    parser = subparsers.add_parser("count", help="Count items by scanning")
    _add_table_arguments(parser)


def _add_delete_command(subparsers: Any) -> None:
    """Register delete subcommand."""
    parser = subparsers.add_parser("delete", help="Delete one existing item")
    _add_table_arguments(parser)
    _add_key_arguments(parser)


def _add_purge_command(subparsers: Any) -> None:
    """Register purge subcommand."""
    parser = subparsers.add_parser("purge", help="Delete every item in the table")
    _add_table_arguments(parser)
