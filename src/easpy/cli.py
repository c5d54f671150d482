"""
easpy CLI

Command-line interface for the Ethereum Attestation Service.

Commands:
  schema       - Derive UIDs, encode data, register and look up schemas
  attest       - Attest values under a registered schema
  revoke       - Revoke an attestation
  attestation  - Read attestations
  timestamp    - Timestamp data or query timestamps
  whoami       - Show the signing address
  info         - Show configuration
"""

from __future__ import annotations

import logging
import sys

import click

from . import __version__
from .config import (
    EASPY_ENV,
    get_account,
    get_chain_id,
    get_eas_address,
    get_rpc_url,
    get_schema_registry_address,
    load_env,
    load_private_key,
)


# ============ Banner ============


def _print_banner() -> None:
    click.echo(
        click.style("  ◆ ", fg="cyan")
        + click.style("E A S P Y", fg="bright_white", bold=True)
        + click.style(f"  v{__version__}", dim=True)
    )
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="easpy")
@click.option("--verbose", "-v", is_flag=True, help="Log contract calls and transactions")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """easpy: Ethereum Attestation Service client."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    load_env()
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Commands ============

from .commands.schema import schema
from .commands.attest import attest, attestation, revoke
from .commands.timestamp import timestamp

cli.add_command(schema)
cli.add_command(attest)
cli.add_command(revoke)
cli.add_command(attestation)
cli.add_command(timestamp)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the signing address."""
    try:
        address = get_account(load_private_key()).address
    except ValueError:
        click.echo("No signing key found.")
        click.echo(f"Set PRIVATE_KEY in the environment or in {EASPY_ENV}.")
        sys.exit(1)
    click.echo(f"Address: {address}")


# ============ Info ============


@cli.command()
def info() -> None:
    """Show configuration."""
    _print_banner()

    click.secho("  Configuration ──────────────────────────", fg="cyan")
    click.echo()

    try:
        address = click.style(get_account(load_private_key()).address, fg="bright_white")
    except ValueError:
        address = click.style("not configured", fg="yellow") + click.style("  (set PRIVATE_KEY)", dim=True)

    rows = [
        ("RPC URL:    ", click.style(get_rpc_url(), fg="bright_white")),
        ("Chain ID:   ", click.style(str(get_chain_id()), fg="bright_white")),
        ("EAS:        ", click.style(get_eas_address(), fg="bright_white")),
        ("Registry:   ", click.style(get_schema_registry_address(), fg="bright_white")),
        ("Address:    ", address),
    ]
    for label, value in rows:
        click.echo(click.style(f"  {label}", dim=True) + value)

    click.echo()


# ============ Entry Points ============


def main() -> None:
    """easpy CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
