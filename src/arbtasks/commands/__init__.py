"""
Commands - one module per task.

- hello:    latest block number + HelloWeb3.hello_web3()
- balance:  native balance of an address
- gas:      live gas price and standard transfer fee
- token:    ERC-20 name / symbol / decimals
- transfer: guarded EIP-1559 native transfer
"""

from __future__ import annotations

import sys
from typing import NoReturn

import click

from ..config import Settings, load_settings
from ..errors import TaskError


def get_settings(ctx: click.Context) -> Settings:
    """Settings loaded by the root group, or from the environment."""
    obj = ctx.find_root().obj
    if isinstance(obj, dict) and "settings" in obj:
        return obj["settings"]
    return load_settings()


def fail(exc: TaskError) -> NoReturn:
    click.secho(f"ERROR: {exc.describe()}", fg="red", err=True)
    sys.exit(exc.exit_code)
