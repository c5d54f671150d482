"""
Attestation commands - Submit, revoke and read attestations.
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from typing import Optional

import click

from ..config import get_eas_address
from ..eas import EAS
from ..errors import EASError
from ..models import RevocationRequest, RevocationRequestData
from ..schema import SchemaEncoder, SchemaError, derive_schema_uid
from ..utils import ZERO_ADDRESS, ZERO_BYTES32, to_hex
from . import chain_context, coerce_values, fail, jsonable, parse_json_list, rpc_option

eas_option = click.option(
    "--eas",
    "eas_address",
    envvar="EAS_ADDRESS",
    default=get_eas_address,
    help="EAS contract address",
)


@click.command()
@click.argument("schema_string")
@click.option("--values", "values_json", required=True, help="Attestation data as a JSON array")
@click.option("--recipient", default=ZERO_ADDRESS, help="Recipient address")
@click.option("--resolver", default=ZERO_ADDRESS, help="Resolver of the schema")
@click.option("--revocable/--irrevocable", default=True, show_default=True)
@click.option("--expires", type=int, default=0, help="Expiration as unix seconds (0: never)")
@click.option("--ref-uid", default=None, help="UID of a referenced attestation")
@click.option("--value", default=0, type=int, help="ETH value in wei for the resolver")
@eas_option
@rpc_option
def attest(
    schema_string: str,
    values_json: str,
    recipient: str,
    resolver: str,
    revocable: bool,
    expires: int,
    ref_uid: Optional[str],
    value: int,
    eas_address: str,
    rpc_url: str,
) -> None:
    """Attest values under a registered schema."""
    values = parse_json_list(values_json)
    ctx = chain_context(rpc_url, require_key=True)
    client = EAS(eas_address, ctx)
    expiration = datetime.fromtimestamp(expires, tz=timezone.utc) if expires else None

    try:
        encoder = SchemaEncoder(schema_string)
        result = client.attest_values(
            schema_string,
            coerce_values(encoder.fields, values),
            recipient=recipient,
            resolver=resolver,
            revocable=revocable,
            expiration_time=expiration,
            ref_uid=ref_uid or ZERO_BYTES32,
            value=value,
        )
    except (SchemaError, EASError, ValueError, TimeoutError) as exc:
        fail(str(exc))

    click.secho("Attested.", fg="green")
    click.echo(f"  UID:  {to_hex(result.result)}")
    click.echo(f"  TX:   {result.tx_hash}")


@click.command()
@click.argument("uid")
@click.option("--schema", "schema_string", default=None, help="Schema string of the attestation")
@click.option("--schema-uid", default=None, help="Schema UID of the attestation")
@click.option("--resolver", default=ZERO_ADDRESS, help="Resolver of the schema")
@click.option("--value", default=0, type=int, help="ETH value in wei for the resolver")
@eas_option
@rpc_option
def revoke(
    uid: str,
    schema_string: Optional[str],
    schema_uid: Optional[str],
    resolver: str,
    value: int,
    eas_address: str,
    rpc_url: str,
) -> None:
    """Revoke an attestation."""
    ctx = chain_context(rpc_url, require_key=True)
    client = EAS(eas_address, ctx)

    try:
        if schema_uid:
            schema_id = schema_uid
        elif schema_string:
            schema_id = derive_schema_uid(schema_string, resolver, True)
        else:
            attestation = client.get_attestation(uid)
            if attestation is None:
                fail(f"Attestation {uid} not found")
            schema_id = attestation.schema
        result = client.revoke(RevocationRequest(schema_id, RevocationRequestData(uid, value)))
    except (SchemaError, EASError, ValueError, TimeoutError) as exc:
        fail(str(exc))

    click.secho("Revoked.", fg="green")
    click.echo(f"  TX:   {result.tx_hash}")


@click.group()
def attestation() -> None:
    """Read attestations."""


@attestation.command("get")
@click.argument("uid")
@click.option("--decode", "schema_string", default=None, help="Decode the data with this schema")
@eas_option
@rpc_option
def attestation_get(uid: str, schema_string: Optional[str], eas_address: str, rpc_url: str) -> None:
    """Fetch an attestation by UID."""
    client = EAS(eas_address, chain_context(rpc_url))
    try:
        found = client.get_attestation(uid)
        if found is None:
            fail(f"Attestation {uid} not found")
        output = found.to_dict()
        if schema_string:
            output["decoded"] = jsonable(SchemaEncoder(schema_string).decode(found.data))
    except (SchemaError, EASError, ValueError) as exc:
        fail(str(exc))
    click.echo(json.dumps(output, indent=2))


@attestation.command("valid")
@click.argument("uid")
@eas_option
@rpc_option
def attestation_valid(uid: str, eas_address: str, rpc_url: str) -> None:
    """Check whether an attestation exists."""
    client = EAS(eas_address, chain_context(rpc_url))
    try:
        valid = client.is_attestation_valid(uid)
    except (EASError, ValueError) as exc:
        fail(str(exc))
    if valid:
        click.secho("valid", fg="green")
    else:
        click.secho("not valid", fg="yellow")
        sys.exit(2)
