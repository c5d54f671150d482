"""
Schema commands - Derive UIDs, encode data, register and look up schemas.
"""

from __future__ import annotations

import json
from typing import Optional

import click

from ..config import get_schema_registry_address
from ..errors import EASError
from ..registry import SchemaRegistry
from ..schema import SchemaError, SchemaEncoder, format_schema_uid, normalize
from ..utils import ZERO_ADDRESS, hex_to_bytes, to_hex
from . import chain_context, coerce_values, fail, jsonable, parse_json_list, rpc_option

resolver_option = click.option("--resolver", default=ZERO_ADDRESS, help="Resolver contract address")
revocable_option = click.option(
    "--revocable/--irrevocable", default=True, show_default=True, help="Whether attestations can be revoked"
)
registry_option = click.option(
    "--registry",
    envvar="SCHEMA_REGISTRY_ADDRESS",
    default=get_schema_registry_address,
    help="SchemaRegistry contract address",
)


@click.group()
def schema() -> None:
    """Derive UIDs, encode data, register and look up schemas."""


@schema.command("uid")
@click.argument("schema_string")
@resolver_option
@revocable_option
def schema_uid(schema_string: str, resolver: str, revocable: bool) -> None:
    """Compute the UID of a schema without touching the chain."""
    try:
        uid = format_schema_uid(schema_string, resolver, revocable)
    except SchemaError as exc:
        fail(str(exc))
    click.echo(f"Schema: {normalize(schema_string)}")
    click.echo(f"UID:    {uid}")


@schema.command("encode")
@click.argument("schema_string")
@click.option("--values", "values_json", required=True, help="Values as a JSON array")
def schema_encode(schema_string: str, values_json: str) -> None:
    """ABI-encode values against a schema and print the hex."""
    values = parse_json_list(values_json)
    try:
        encoder = SchemaEncoder(schema_string)
        data = encoder.encode(coerce_values(encoder.fields, values))
    except (SchemaError, ValueError) as exc:
        fail(str(exc))
    click.echo(to_hex(data))


@schema.command("decode")
@click.argument("schema_string")
@click.argument("data")
def schema_decode(schema_string: str, data: str) -> None:
    """Decode ABI data against a schema and print it as JSON."""
    try:
        decoded = SchemaEncoder(schema_string).decode(hex_to_bytes(data))
    except (SchemaError, ValueError) as exc:
        fail(str(exc))
    click.echo(json.dumps(jsonable(decoded), indent=2))


@schema.command("register")
@click.argument("schema_string")
@resolver_option
@revocable_option
@registry_option
@rpc_option
def schema_register(schema_string: str, resolver: str, revocable: bool, registry: str, rpc_url: str) -> None:
    """Register a schema with the SchemaRegistry."""
    ctx = chain_context(rpc_url, require_key=True)
    client = SchemaRegistry(registry, ctx)

    click.echo(f"  Sender:    {ctx.sender}")
    click.echo(f"  Registry:  {client.address}")
    click.echo(f"  Schema:    {schema_string}")
    click.echo("")

    try:
        result = client.register(schema_string, resolver, revocable)
    except (SchemaError, EASError, ValueError, TimeoutError) as exc:
        fail(str(exc))

    click.secho("Schema registered.", fg="green")
    click.echo(f"  UID:  {to_hex(result.result)}")
    click.echo(f"  TX:   {result.tx_hash}")


@schema.command("get")
@click.argument("uid", required=False)
@click.option("--schema", "schema_string", default=None, help="Look up by schema string instead of UID")
@resolver_option
@revocable_option
@registry_option
@rpc_option
def schema_get(
    uid: Optional[str],
    schema_string: Optional[str],
    resolver: str,
    revocable: bool,
    registry: str,
    rpc_url: str,
) -> None:
    """Fetch a registered schema by UID or by its schema string."""
    if not uid and not schema_string:
        fail("Give a UID or --schema")

    client = SchemaRegistry(registry, chain_context(rpc_url))
    try:
        if uid:
            record = client.get_schema(uid)
        else:
            record = client.get_schema_by_description(schema_string, revocable, resolver)
    except (SchemaError, EASError, ValueError) as exc:
        fail(str(exc))

    if record is None:
        fail("Schema not registered")
    click.echo(json.dumps(record.to_dict(), indent=2))
