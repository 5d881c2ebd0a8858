"""
dualcall CLI

Deploys a generated contract to an Ethereum-compatible node and
exercises it through JSON-RPC.

Commands:
  run      - Deploy, emit an event, call the contract back
  balance  - Show the funding account balance
  whoami   - Show the funding account address
"""

from __future__ import annotations

import sys

import click

from .pneuma.rpc import DEFAULT_RPC_URL, get_balance
from .sigil.eth import get_address, load_private_key


# ============ Constants ============

VERSION = "0.1.0"


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="dualcall")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """dualcall: deploy and call a generated contract."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.run import run

cli.add_command(run)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show the funding account address."""
    try:
        address = get_address(load_private_key())
    except ValueError as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(1)
    click.echo(f"Address: {address}")


@cli.command()
@click.option(
    "--rpc-url",
    envvar="ETH_RPC_URL",
    default=DEFAULT_RPC_URL,
    help="JSON-RPC endpoint",
)
def balance(rpc_url: str) -> None:
    """Show the funding account balance in wei."""
    try:
        address = get_address(load_private_key())
        wei = get_balance(address, rpc_url=rpc_url)
    except Exception as exc:
        click.secho(f"ERROR: {exc}", fg="red", err=True)
        sys.exit(getattr(exc, "exit_code", 1))

    click.echo(f"Address: {address}")
    click.echo(f"Balance: {wei}")


# ============ Entry Points ============


def main() -> None:
    """dualcall CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
