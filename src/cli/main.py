"""Shelter-sync CLI entry points.
This module exposes schema setup and record ingest commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import asdict, replace
import json
from pathlib import Path
import sys
from typing import Any, Sequence

from core.config import SyncConfig
from core.errors import SyncError
from core.types import ExternalRecord
from store.sync_sdk import SyncClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="shelter-sync",
        description="Sync adoption-form records into store metaobjects",
    )
    parser.add_argument("--store-domain", help="Override SHOPIFY_STORE_DOMAIN for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_setup_schema_command(subparsers)
    _add_ingest_command(subparsers)
    _add_normalize_command(subparsers)
    _add_serve_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None, client: SyncClient | None = None) -> int:
    """Run the shelter-sync CLI.

    Args:
        argv: Optional argument vector.
        client: Optional prebuilt SDK client.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        sync_client = client or _build_client(args.store_domain)
        if args.command == "setup-schema":
            return _run_setup_schema_command(sync_client, args)
        if args.command == "ingest":
            return _run_ingest_command(sync_client, args)
        if args.command == "normalize":
            return _run_normalize_command(sync_client, args)
        if args.command == "serve":
            return _run_serve_command(sync_client, args)
    except SyncError as error:
        print(json.dumps({"ok": False, **error.to_payload()}, sort_keys=True))
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(store_domain: str | None) -> SyncClient:
    """Build SDK client with optional store-domain override.

    Args:
        store_domain: Optional override domain.

    Returns:
        Configured SDK client.
    """
    config = SyncConfig.from_env()
    if store_domain:
        config = replace(config, store_domain=store_domain)
    return SyncClient(config)


def _run_setup_schema_command(client: SyncClient, args: argparse.Namespace) -> int:
    """Handle setup-schema command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    result = client.reconcile_schema(dry_run=args.dry_run)
    print(f"outcome={result.outcome}")
    print(f"type={result.type_name}")
    print(f"fields={','.join(result.created_keys) or '-'}")
    return 0


def _run_ingest_command(client: SyncClient, args: argparse.Namespace) -> int:
    """Handle ingest command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    result = client.ingest(_read_record(args.source))
    print(
        json.dumps(
            {
                "ok": True,
                "id": result.entity.id,
                "handle": result.entity.handle,
                "status": result.entity.publication_state,
                "assets_attempted": result.assets_attempted,
                "assets_materialized": result.assets_materialized,
            },
            sort_keys=True,
        )
    )
    return 0


def _run_normalize_command(client: SyncClient, args: argparse.Namespace) -> int:
    """Handle normalize command."""
    record = client.normalize(_read_record(args.source))
    payload = asdict(record)
    payload["values"] = dict(record.values)
    print(json.dumps(payload, indent=2, sort_keys=True))
    return 0


def _run_serve_command(client: SyncClient, args: argparse.Namespace) -> int:
    """Handle serve command."""
    import uvicorn

    from server.app import create_app

    uvicorn.run(create_app(client), host=args.host, port=args.port)
    return 0


def _read_record(source: str) -> ExternalRecord:
    """Load one JSON object record from a file path or stdin.

    Args:
        source: File path, or ``-`` for stdin.

    Returns:
        Parsed record mapping.

    Raises:
        SyncError: If the input is not a JSON object.
    """
    if source == "-":
        text = sys.stdin.read()
    else:
        source_path = Path(source).expanduser()
        if not source_path.is_file():
            raise SyncError(
                f"Failed to read record at {source_path}: file does not exist.",
                step="read",
            )
        text = source_path.read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as error:
        raise SyncError(
            f"Failed to parse record JSON from {source}: {error.msg}. "
            "Fix the JSON syntax and retry.",
            step="read",
        ) from error
    if not isinstance(payload, dict):
        raise SyncError(f"Invalid record in {source}: expected a JSON object.", step="read")
    return payload


def _add_setup_schema_command(subparsers: Any) -> None:
    """Register setup-schema subcommand."""
    parser = subparsers.add_parser(
        "setup-schema",
        help="Create or extend the store type definition",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report which fields would be created",
    )


def _add_ingest_command(subparsers: Any) -> None:
    """Register ingest subcommand."""
    parser = subparsers.add_parser("ingest", help="Upsert one JSON record into the store")
    parser.add_argument("source", help="Path to a JSON object file, or - for stdin")


def _add_normalize_command(subparsers: Any) -> None:
    """Register normalize subcommand."""
    parser = subparsers.add_parser(
        "normalize",
        help="Print the normalized form of one JSON record without writing",
    )
    parser.add_argument("source", help="Path to a JSON object file, or - for stdin")


def _add_serve_command(subparsers: Any) -> None:
    """Register serve subcommand."""
    parser = subparsers.add_parser("serve", help="Run the webhook and setup HTTP endpoints")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
