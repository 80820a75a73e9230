"""
Transfer - send ETH with EIP-1559 fees, guarded by two balance checks.

Reads PRIVATE_KEY, RECIPIENT_ADDRESS, AMOUNT_ETH and ARBITRUM_RPC_URL from
the environment (or ./.env); options override everything but the key.
"""

from __future__ import annotations

import sys
from typing import Optional

import click

from ..chain.client import NodeClient
from ..config import parse_amount
from ..errors import ConfigError, ConfirmationWaitFailedError, TaskError
from ..transfer import GuardedTransfer, ReceiptWait, TransferIntent, TxStatus
from ..wallet.signer import Credential
from . import fail, get_settings


@click.command()
@click.option("--to", "recipient", default=None,
              help="Recipient address (default: RECIPIENT_ADDRESS)")
@click.option("--amount", "amount_eth", default=None,
              help="Amount in ETH, e.g. 0.001 (default: AMOUNT_ETH or 0.001)")
@click.option("--chain-id", type=int, default=None,
              help="Refuse to sign unless the node reports this chain id (default: CHAIN_ID)")
@click.option("--poll-interval", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Seconds between receipt polls (default: 0.25)")
@click.option("--timeout", "receipt_timeout", type=click.FloatRange(min=0, min_open=True),
              default=None, help="Seconds to wait for a receipt (default: 120)")
@click.option("--no-wait", is_flag=True, help="Return right after broadcast")
@click.pass_context
def transfer(
    ctx: click.Context,
    recipient: Optional[str],
    amount_eth: Optional[str],
    chain_id: Optional[int],
    poll_interval: Optional[float],
    receipt_timeout: Optional[float],
    no_wait: bool,
) -> None:
    """Send a native ETH transfer with a safe EIP-1559 fee envelope.

    \b
    Examples:
      arbtasks transfer --to 0xAbc... --amount 0.001
      arbtasks transfer --no-wait
    """
    settings = get_settings(ctx)
    amount_eth = amount_eth or settings.amount_eth

    click.echo(click.style("  RPC:    ", dim=True) + settings.rpc_url)
    click.echo(click.style("  Amount: ", dim=True) + f"{amount_eth} ETH")
    click.echo()

    try:
        if not settings.private_key:
            raise ConfigError("PRIVATE_KEY not set. Add it to the environment or .env")
        recipient = recipient or settings.recipient
        if not recipient:
            raise ConfigError("RECIPIENT_ADDRESS not set. Use --to or add it to .env")

        credential = Credential.from_private_key(
            settings.private_key,
            chain_id=chain_id if chain_id is not None else settings.chain_id,
        )
        intent = TransferIntent(
            recipient=recipient,
            amount=parse_amount(amount_eth),
            credential=credential,
        )
        wait = None if no_wait else ReceiptWait(
            poll_interval=poll_interval or settings.poll_interval,
            timeout=receipt_timeout or settings.receipt_timeout,
        )

        workflow = GuardedTransfer(
            NodeClient(settings.rpc_url, timeout=settings.rpc_timeout),
            wait=wait,
            explorer_url=settings.explorer_url,
            echo=click.echo,
        )
        submitted = workflow.run(intent)
    except ConfirmationWaitFailedError as exc:
        click.secho(
            f"Transaction {exc.tx_hash} was broadcast; do not resend before checking it.",
            fg="yellow",
            err=True,
        )
        fail(exc)
    except TaskError as exc:
        fail(exc)

    click.echo()
    if submitted.status is TxStatus.CONFIRMED and not submitted.succeeded:
        click.secho(f"Transaction reverted: {submitted.tx_hash}", fg="red", err=True)
        sys.exit(1)
    if submitted.status is TxStatus.CONFIRMED:
        click.secho("Transfer successful!", fg="green", bold=True)
    elif submitted.status is TxStatus.UNKNOWN:
        click.secho("Transfer broadcast, confirmation unknown.", fg="yellow")
    else:
        click.secho("Transfer broadcast.", fg="cyan")
