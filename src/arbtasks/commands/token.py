"""
Token - read-only ERC-20 metadata.

Queries name(), symbol() and decimals() on a token contract. Each query is
reported on its own, so one reverting view does not hide the others.
"""

from __future__ import annotations

import sys
from typing import Any

import click
from eth_abi.exceptions import DecodingError

from ..chain.abi import ERC20_METADATA_ABI
from ..chain.rpc import get_block_number, read_contract
from ..errors import TaskError
from ..utils import validate_address
from . import fail, get_settings

# Test USDC on Arbitrum Sepolia
DEFAULT_TOKEN_ADDRESS = "0x75faf114eafb1BDbe2F0316DF893fd58CE46AA4d"

_QUERIES = (
    ("name", "Name"),
    ("symbol", "Symbol"),
    ("decimals", "Decimals"),
)


@click.command()
@click.option("--address", "token_address", default=DEFAULT_TOKEN_ADDRESS,
              envvar="TOKEN_ADDRESS", show_default=True,
              help="ERC-20 token contract address")
@click.pass_context
def token(ctx: click.Context, token_address: str) -> None:
    """Query an ERC-20 contract's name, symbol and decimals."""
    settings = get_settings(ctx)

    try:
        address = validate_address(token_address, "--address")
        block_number = get_block_number(rpc_url=settings.rpc_url, timeout=settings.rpc_timeout)
    except TaskError as exc:
        fail(exc)

    click.echo(f"Connected. Current block: {block_number}")
    click.echo(f"Contract: {address}")
    click.echo()

    results: dict[str, Any] = {}
    for function_name, label in _QUERIES:
        click.echo(f"Querying {function_name}()...")
        try:
            value = read_contract(
                address, function_name, ERC20_METADATA_ABI,
                rpc_url=settings.rpc_url, timeout=settings.rpc_timeout,
            )
        except (TaskError, DecodingError) as exc:
            click.secho(f"  {label}: query failed ({exc})", fg="red", err=True)
            continue
        if value is None:
            click.secho(f"  {label}: empty result (not a contract?)", fg="yellow", err=True)
            continue
        results[function_name] = value
        click.echo(click.style(f"  {label}: ", dim=True) + click.style(str(value), fg="bright_white"))

    click.echo()
    if not results:
        click.secho("All queries failed.", fg="red", err=True)
        sys.exit(1)
    click.echo("Contract query complete.")
