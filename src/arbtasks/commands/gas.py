"""
Gas - live gas price and the fee of a standard transfer.

fee = gas price x gas limit, with 21,000 gas as the fixed cost of a plain
ETH transfer.
"""

from __future__ import annotations

import click

from ..chain.rpc import get_gas_price
from ..errors import TaskError
from ..utils import format_ether, format_gwei
from . import fail, get_settings

STANDARD_TRANSFER_GAS = 21_000


@click.command()
@click.option("--gas-limit", default=STANDARD_TRANSFER_GAS, type=click.IntRange(min=1),
              show_default=True, help="Gas limit to price")
@click.pass_context
def gas(ctx: click.Context, gas_limit: int) -> None:
    """Show the gas price and estimated transfer fee."""
    settings = get_settings(ctx)

    try:
        gas_price = get_gas_price(rpc_url=settings.rpc_url, timeout=settings.rpc_timeout)
    except TaskError as exc:
        fail(exc)

    fee = gas_price * gas_limit

    click.secho("  Gas ────────────────────────────────────", fg="cyan")
    click.echo(f"  Gas price:     {gas_price} wei ({format_gwei(gas_price)} gwei)")
    click.echo(f"  Gas limit:     {gas_limit}")
    click.echo(f"  Estimated fee: {fee} wei")
    click.echo(f"  In ETH:        {format_ether(fee)} ETH")
