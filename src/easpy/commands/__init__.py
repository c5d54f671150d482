"""
Commands - Command implementations for the easpy CLI.

Each module corresponds to a top-level CLI command or command group:
- schema:      Derive UIDs, encode data, register and look up schemas
- attest:      Submit and revoke attestations, read them back
- timestamp:   Timestamp data and query timestamps
"""

from __future__ import annotations

import dataclasses
import json
import sys
from typing import Any, NoReturn

import click

from ..config import DEFAULT_RPC_URL, ChainContext
from ..schema import SchemaField
from ..utils import hex_to_bytes

rpc_option = click.option(
    "--rpc-url",
    envvar="EAS_RPC_URL",
    default=DEFAULT_RPC_URL,
    show_default=True,
    help="JSON-RPC endpoint",
)


def fail(message: str) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red", err=True)
    sys.exit(1)


def chain_context(rpc_url: str, require_key: bool = False) -> ChainContext:
    """Build a ChainContext for a command, exiting if a required key is missing."""
    try:
        ctx = ChainContext.from_env(require_key=require_key)
    except ValueError as exc:
        fail(str(exc))
    return dataclasses.replace(ctx, rpc_url=rpc_url)


def parse_json_list(text: str, what: str = "values") -> list[Any]:
    try:
        values = json.loads(text)
    except json.JSONDecodeError as exc:
        fail(f"Invalid {what}: {exc}")
    if not isinstance(values, list):
        fail(f"Invalid {what}: must be a JSON array")
    return values


def coerce_values(fields: list[SchemaField], values: list[Any]) -> list[Any]:
    """Turn JSON hex strings into bytes for bytes/bytesN fields."""
    coerced = []
    for f, value in zip(fields, values):
        if f.type.startswith("bytes") and "[" not in f.type and isinstance(value, str):
            value = hex_to_bytes(value)
        coerced.append(value)
    coerced.extend(values[len(fields):])
    return coerced


def jsonable(value: Any) -> Any:
    """Render decoded ABI values for JSON output."""
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    return value
