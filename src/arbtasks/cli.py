"""
arbtasks CLI

Command-line exercises against an Arbitrum Sepolia JSON-RPC node.

Commands:
  hello     - Latest block number + HelloWeb3 contract call
  balance   - ETH balance of an address
  gas       - Live gas price and transfer fee estimate
  token     - ERC-20 name / symbol / decimals
  transfer  - Guarded EIP-1559 ETH transfer
  whoami    - Show the configured wallet address
  info      - Show configuration
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from typing import Optional

import click

from .config import load_env, load_settings
from .errors import ConfigError, TaskError
from .utils import mask_secret
from .wallet.signer import get_address

# ============ Constants ============

VERSION = "0.1.0"


# ============ Banner ============


def _print_banner(compact: bool = False) -> None:
    """Print the arbtasks banner.

    Args:
        compact: If True, print a single-line banner.
    """
    if compact:
        click.echo(
            click.style("  ◆ ", fg="cyan")
            + click.style("A R B T A S K S", fg="bright_white", bold=True)
            + click.style(f"  v{VERSION}", dim=True)
        )
        click.echo()
        return

    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("        A R B T A S K S", fg="bright_white", bold=True)
        + click.style(f"        v{VERSION}", dim=True)
    )
    click.secho("        ─── Arbitrum Sepolia RPC drills ───", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="arbtasks")
@click.option("--rpc-url", default=None,
              help="JSON-RPC endpoint (default: ARBITRUM_RPC_URL or the public Arbitrum Sepolia RPC)")
@click.option("--verbose", "-v", is_flag=True, help="Log RPC traffic to stderr")
@click.pass_context
def cli(ctx: click.Context, rpc_url: Optional[str], verbose: bool) -> None:
    """arbtasks: Arbitrum Sepolia JSON-RPC exercises."""
    _configure_logging(verbose)
    try:
        settings = load_settings()
    except ConfigError as exc:
        click.secho(f"ERROR: {exc.describe()}", fg="red", err=True)
        sys.exit(exc.exit_code)
    if rpc_url:
        settings = dataclasses.replace(settings, rpc_url=rpc_url)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings

    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Task Commands ============

from .commands.balance import balance
from .commands.gas import gas
from .commands.hello import hello
from .commands.token import token
from .commands.transfer import transfer

cli.add_command(hello)
cli.add_command(balance)
cli.add_command(gas)
cli.add_command(token)
cli.add_command(transfer)


# ============ Identity ============


@cli.command()
def whoami() -> None:
    """Show current wallet identity."""
    try:
        address = get_address()
    except TaskError:
        click.echo("No wallet found.")
        click.echo("Set PRIVATE_KEY in the environment or .env.")
        sys.exit(1)
    click.echo(f"Address: {address}")


# ============ Info ============


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show configuration."""
    settings = ctx.find_root().obj["settings"]
    _print_banner(compact=True)

    # ── Config ──
    click.secho("  Config ─────────────────────────────────", fg="cyan")
    click.echo()

    rows = [
        ("RPC:        ", settings.rpc_url),
        ("Explorer:   ", settings.explorer_url),
        ("Amount:     ", f"{settings.amount_eth} ETH"),
        ("Recipient:  ", settings.recipient or "not set"),
        ("Chain pin:  ", str(settings.chain_id) if settings.chain_id is not None else "none"),
    ]
    for label, value in rows:
        click.echo(click.style(f"  {label}", dim=True) + click.style(value, fg="bright_white"))

    if settings.private_key:
        try:
            address = get_address(settings.private_key)
            key_text = click.style(address, fg="bright_white") + click.style(
                f"  ({mask_secret(settings.private_key)})", dim=True
            )
        except ConfigError:
            key_text = click.style("invalid PRIVATE_KEY", fg="red")
    else:
        key_text = click.style("not set", fg="yellow") + click.style("  (PRIVATE_KEY)", dim=True)
    click.echo(click.style("  Wallet:     ", dim=True) + key_text)
    click.echo()

    # ── Commands ──
    click.secho("  Commands ───────────────────────────────", fg="cyan")
    click.echo()

    commands = [
        ("hello   ", "Block number + HelloWeb3 call"),
        ("balance ", "ETH balance of an address"),
        ("gas     ", "Gas price and transfer fee"),
        ("token   ", "ERC-20 name / symbol / decimals"),
        ("transfer", "Guarded EIP-1559 ETH transfer"),
        ("whoami  ", "Show current wallet address"),
    ]
    for cmd, desc in commands:
        click.echo(
            click.style("  ", dim=True)
            + click.style(cmd, fg="bright_white", bold=True)
            + click.style("  ◇  ", fg="cyan")
            + click.style(desc, dim=True)
        )

    click.echo()


# ============ Entry Points ============


def main() -> None:
    """arbtasks CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    load_env()
    cli()


if __name__ == "__main__":
    main()
