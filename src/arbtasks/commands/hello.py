"""
Hello - first contact with the chain.

Prints the latest block number and the string returned by a deployed
``HelloWeb3.hello_web3()`` contract.
"""

from __future__ import annotations

import click

from ..chain.abi import HELLO_WEB3_ABI
from ..chain.rpc import get_block_number, read_contract
from ..errors import TaskError
from ..utils import validate_address
from . import fail, get_settings

HELLO_WEB3_ADDRESS = "0x3f1f78ED98Cd180794f1346F5bD379D5Ec47DE90"


@click.command()
@click.option("--contract", default=HELLO_WEB3_ADDRESS, show_default=True,
              help="HelloWeb3 contract address")
@click.pass_context
def hello(ctx: click.Context, contract: str) -> None:
    """Print the latest block number and call hello_web3()."""
    settings = get_settings(ctx)

    try:
        address = validate_address(contract, "--contract")
        block_number = get_block_number(rpc_url=settings.rpc_url, timeout=settings.rpc_timeout)
        click.echo(f"Latest block number: {block_number}")

        greeting = read_contract(
            address, "hello_web3", HELLO_WEB3_ABI,
            rpc_url=settings.rpc_url, timeout=settings.rpc_timeout,
        )
    except TaskError as exc:
        fail(exc)

    click.echo(f"Contract says: {greeting if greeting is not None else '(empty)'}")
