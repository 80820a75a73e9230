"""
NodeClient - the chain client the transfer workflow talks to.

Binds one RPC endpoint and exposes the seven operations the workflow
needs. Transport, signing and fee heuristics stay in the modules they
come from; this class only routes calls.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..config import DEFAULT_RPC_TIMEOUT
from ..wallet.signer import ChainSigner
from . import fees, rpc

logger = logging.getLogger(__name__)


class NodeClient:
    def __init__(self, rpc_url: str, timeout: float = DEFAULT_RPC_TIMEOUT) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout

    def get_balance(self, address: str) -> int:
        return rpc.get_balance(address, rpc_url=self.rpc_url, timeout=self.timeout)

    def get_chain_id(self) -> int:
        return rpc.get_chain_id(rpc_url=self.rpc_url, timeout=self.timeout)

    def get_block(self, block: str = "latest") -> Optional[dict]:
        """Latest block header with ``base_fee_per_gas`` decoded when present."""
        raw = rpc.get_block(block, rpc_url=self.rpc_url, timeout=self.timeout)
        if raw is None:
            return None
        header = dict(raw)
        base_fee = raw.get("baseFeePerGas")
        header["base_fee_per_gas"] = int(base_fee, 16) if base_fee else None
        if raw.get("number"):
            header["number"] = int(raw["number"], 16)
        return header

    def estimate_fees(self) -> tuple[int, int]:
        return fees.estimate_fees(rpc_url=self.rpc_url, timeout=self.timeout)

    def estimate_gas(self, tx: dict) -> int:
        return rpc.estimate_gas(tx, rpc_url=self.rpc_url, timeout=self.timeout)

    def send_transaction(self, tx: dict, signer: ChainSigner) -> str:
        """Fill the nonce, sign with the bound signer and broadcast.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        fields = dict(tx)
        if fields.get("nonce") is None:
            fields["nonce"] = rpc.get_nonce(
                signer.address, rpc_url=self.rpc_url, timeout=self.timeout
            )
        raw_tx = signer.sign_transaction(fields)
        logger.debug("broadcasting nonce=%d from %s", fields["nonce"], signer.address)
        return rpc.send_raw_transaction(raw_tx, rpc_url=self.rpc_url, timeout=self.timeout)

    def get_receipt(self, tx_hash: str) -> Optional[dict]:
        return rpc.get_transaction_receipt(tx_hash, rpc_url=self.rpc_url, timeout=self.timeout)
