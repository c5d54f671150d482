"""
Timestamp commands - Timestamp 32-byte values and query their timestamps.
"""

from __future__ import annotations

import click

from ..eas import EAS
from ..errors import EASError
from .attest import eas_option
from . import chain_context, fail, rpc_option


@click.command()
@click.argument("data", nargs=-1, required=True)
@click.option("--query", is_flag=True, help="Only read the existing timestamp")
@eas_option
@rpc_option
def timestamp(data: tuple[str, ...], query: bool, eas_address: str, rpc_url: str) -> None:
    """
    Timestamp one or more 32-byte hex values.

    With --query, print when each value was timestamped instead.
    """
    if query:
        client = EAS(eas_address, chain_context(rpc_url))
        for item in data:
            try:
                when = client.get_timestamp(item)
            except (EASError, ValueError) as exc:
                fail(str(exc))
            click.echo(f"{item}  {when.isoformat() if when else 'never'}")
        return

    client = EAS(eas_address, chain_context(rpc_url, require_key=True))
    try:
        if len(data) == 1:
            result = client.timestamp(data[0])
        else:
            result = client.multi_timestamp(list(data))
    except (EASError, ValueError, TimeoutError) as exc:
        fail(str(exc))

    click.secho("Timestamped.", fg="green")
    click.echo(f"  Time: {result.result.isoformat() if result.result else '?'}")
    click.echo(f"  TX:   {result.tx_hash}")
