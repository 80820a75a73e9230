"""
Guarded transfer workflow.

Sends a native-currency transfer with EIP-1559 fees, checking affordability
twice before anything touches the mempool:

1.  Resolve the chain id and bind the credential to it
2.  Read sender/recipient balances, fail fast if amount > balance
3.  Read the latest base fee
4.  Read the node's suggested (max fee, tip)
5.  final max fee = max(suggested, base + tip) + 20%
6.  Build the request without a gas limit
7.  Estimate gas, gas limit = estimate + 20% (rounded up)
8.  Re-check amount + gas_limit * max_fee against the balance
9.  Sign and broadcast, report the hash at once
10. Poll for the receipt within a bounded window

Every failure raises immediately; nothing is retried.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

from ..config import DEFAULT_EXPLORER_URL
from ..errors import (
    ConfirmationWaitFailedError,
    EstimationFailedError,
    FeeDataUnavailableError,
    NodeConnectionError,
    RPCError,
    SubmissionFailedError,
)
from ..utils import explorer_tx_url, format_ether
from ..wallet.signer import ChainSigner
from . import policy
from .models import (
    FeeEnvelope,
    GasBudget,
    ReceiptWait,
    SubmittedTransaction,
    TransferIntent,
    TxStatus,
)

logger = logging.getLogger(__name__)


class ChainClient(Protocol):
    """What the workflow needs from a node. ``NodeClient`` is the real one."""

    def get_balance(self, address: str) -> int: ...

    def get_chain_id(self) -> int: ...

    def get_block(self, block: str = "latest") -> Optional[dict]: ...

    def estimate_fees(self) -> tuple[int, int]: ...

    def estimate_gas(self, tx: dict) -> int: ...

    def send_transaction(self, tx: dict, signer: ChainSigner) -> str: ...

    def get_receipt(self, tx_hash: str) -> Optional[dict]: ...


class GuardedTransfer:
    """
    One guarded transfer against an injected chain client.

    Args:
        client: Chain client (``NodeClient`` or a test double)
        wait: Receipt polling window; None to return right after broadcast
        explorer_url: Block explorer base URL for the tx link
        echo: Progress line sink (defaults to the module logger)
        sleep: Sleep function used between receipt polls
    """

    def __init__(
        self,
        client: ChainClient,
        wait: Optional[ReceiptWait] = ReceiptWait(),
        explorer_url: str = DEFAULT_EXPLORER_URL,
        echo: Optional[Callable[[str], None]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.wait = wait
        self.explorer_url = explorer_url
        self._echo = echo or logger.info
        self._sleep = sleep

    def run(self, intent: TransferIntent) -> SubmittedTransaction:
        signer = self._bind_signer(intent)
        sender = signer.address

        self._echo(f"Sender:    {sender}")
        self._echo(f"Recipient: {intent.recipient}")
        self._echo(f"Chain ID:  {signer.chain_id}")
        self._echo(f"Amount:    {intent.amount} wei")

        sender_balance = self.client.get_balance(sender)
        recipient_balance = self.client.get_balance(intent.recipient)
        self._echo(f"Sender balance:    {format_ether(sender_balance)} ETH")
        self._echo(f"Recipient balance: {format_ether(recipient_balance)} ETH")
        policy.check_balance_covers_amount(intent.amount, sender_balance)

        fees = self._fee_envelope()
        self._echo(f"baseFee:          {fees.base_fee} wei")
        self._echo(f"tip (suggested):  {fees.suggested_tip} wei")
        self._echo(f"maxFee (suggested): {fees.suggested_max_fee} wei")
        self._echo(f"maxFee (final +20%): {fees.final_max_fee} wei")

        tx = {
            "type": 2,
            "chainId": signer.chain_id,
            "from": sender,
            "to": intent.recipient,
            "value": intent.amount,
            "maxFeePerGas": fees.final_max_fee,
            "maxPriorityFeePerGas": fees.suggested_tip,
        }

        gas = self._gas_budget(tx)
        tx["gas"] = gas.gas_limit
        self._echo(f"gas estimate:     {gas.estimated_gas}")
        self._echo(f"gas limit (+20%): {gas.gas_limit}")

        total = policy.check_balance_covers_worst_case(intent.amount, gas, fees, sender_balance)
        self._echo(f"Max gas cost:   {format_ether(gas.gas_limit * fees.final_max_fee)} ETH")
        self._echo(f"Max total cost: {format_ether(total)} ETH")

        self._echo("Sending transaction...")
        submitted = SubmittedTransaction(
            tx_hash=self._broadcast(tx, signer),
            chain_id=signer.chain_id,
            fees=fees,
            gas=gas,
        )
        self._echo(f"Broadcast! tx hash: {submitted.tx_hash}")
        self._echo(f"Explorer: {explorer_tx_url(self.explorer_url, submitted.tx_hash)}")

        if self.wait is not None:
            self._await_receipt(submitted, self.wait)
        return submitted

    # -- steps ---------------------------------------------------------------

    def _bind_signer(self, intent: TransferIntent) -> ChainSigner:
        chain_id = self.client.get_chain_id()
        return intent.credential.bind(chain_id)

    def _fee_envelope(self) -> FeeEnvelope:
        try:
            block = self.client.get_block("latest")
        except NodeConnectionError:
            raise
        except RPCError as exc:
            raise FeeDataUnavailableError(
                f"could not read latest block: {exc}", step="latest_block"
            ) from exc
        if block is None:
            raise FeeDataUnavailableError("node returned no latest block", step="latest_block")
        base_fee = block.get("base_fee_per_gas")
        if base_fee is None:
            raise FeeDataUnavailableError(
                "latest block has no base_fee_per_gas (EIP-1559 unsupported by this RPC?)",
                step="latest_block",
            )

        try:
            suggested_max_fee, suggested_tip = self.client.estimate_fees()
        except (NodeConnectionError, FeeDataUnavailableError):
            raise
        except RPCError as exc:
            raise FeeDataUnavailableError(
                f"fee estimation failed: {exc}", step="estimate_fees"
            ) from exc

        return policy.compute_fee_envelope(base_fee, suggested_tip, suggested_max_fee)

    def _gas_budget(self, tx: dict) -> GasBudget:
        try:
            estimate = self.client.estimate_gas(tx)
        except RPCError as exc:
            raise EstimationFailedError(
                f"estimate_gas failed: {exc}",
                step="estimate_gas",
                details={"to": tx["to"], "value": tx["value"]},
            ) from exc
        return policy.compute_gas_budget(estimate)

    def _broadcast(self, tx: dict, signer: ChainSigner) -> str:
        try:
            return self.client.send_transaction(tx, signer)
        except NodeConnectionError as exc:
            # The request may have reached the node before the connection broke.
            raise NodeConnectionError(
                f"connection lost while broadcasting: {exc} (the transaction may "
                f"already be in the mempool; check the sender's nonce before resending)",
                step="send_transaction",
                details={"sender": signer.address, "to": tx["to"], "value": tx["value"]},
            ) from exc
        except RPCError as exc:
            raise SubmissionFailedError(
                f"transaction was not accepted: {exc}",
                step="send_transaction",
                details={"gas": tx["gas"], "maxFeePerGas": tx["maxFeePerGas"]},
            ) from exc

    def _await_receipt(self, submitted: SubmittedTransaction, wait: ReceiptWait) -> None:
        self._echo("Waiting for confirmation...")
        for attempt in range(wait.attempts):
            try:
                receipt = self.client.get_receipt(submitted.tx_hash)
            except Exception as exc:
                raise ConfirmationWaitFailedError(
                    f"waiting for receipt failed: {exc} (transaction was broadcast, "
                    f"check {submitted.tx_hash} before resending)",
                    tx_hash=submitted.tx_hash,
                    step="await_receipt",
                ) from exc
            if receipt is not None:
                submitted.confirm(receipt)
                self._echo("Confirmed!")
                self._echo(f"Block:    {submitted.block_number}")
                self._echo(f"Gas used: {submitted.gas_used}")
                self._echo(f"Status:   {'success' if submitted.succeeded else 'reverted'}")
                return
            if attempt + 1 < wait.attempts:
                self._sleep(wait.poll_interval)

        submitted.status = TxStatus.UNKNOWN
        logger.info("no receipt for %s after %d polls", submitted.tx_hash, wait.attempts)
        self._echo(
            "Sent, but no receipt yet (may still be pending); "
            "look the hash up in the explorer."
        )
