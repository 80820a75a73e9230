"""Balance - native balance of one address, in wei and ether."""

from __future__ import annotations

import click

from ..chain.rpc import get_balance
from ..errors import TaskError
from ..utils import format_ether, validate_address
from . import fail, get_settings


@click.command()
@click.argument("address")
@click.pass_context
def balance(ctx: click.Context, address: str) -> None:
    """Show the ETH balance of ADDRESS."""
    settings = get_settings(ctx)

    try:
        checksummed = validate_address(address, "ADDRESS")
        wei = get_balance(checksummed, rpc_url=settings.rpc_url, timeout=settings.rpc_timeout)
    except TaskError as exc:
        fail(exc)

    eth = format_ether(wei)
    click.echo(
        click.style("addr=", dim=True) + checksummed
        + click.style(" | eth=", dim=True) + click.style(eth, fg="green", bold=True)
        + click.style(" | wei=", dim=True) + str(wei)
    )
