"""
secp256k1 signing credential for arbtasks.

A ``Credential`` wraps the private key loaded from PRIVATE_KEY (environment
or ./.env). Before it can sign anything it must be bound to the chain id the
node reports, producing a ``ChainSigner``; a credential pinned to another
chain is rejected at bind time, and a signer refuses transactions for any
chain other than its own.

Dependencies: eth-account (lightweight, no full web3.py needed)
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..errors import ChainMismatchError, ConfigError
from ..utils import mask_secret

logger = logging.getLogger(__name__)


def load_private_key() -> str:
    """
    Load the private key from the environment.

    ``main()`` loads ./.env into the environment before any command runs.

    Returns:
        0x-prefixed hex private key

    Raises:
        ConfigError: If PRIVATE_KEY is not set
    """
    private_key = os.environ.get("PRIVATE_KEY", "").strip()
    if not private_key:
        raise ConfigError("PRIVATE_KEY not found. Set PRIVATE_KEY in the environment or .env")

    # Ensure 0x prefix
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


class ChainSigner:
    """A credential bound to one chain id."""

    def __init__(self, account: LocalAccount, chain_id: int) -> None:
        self._account = account
        self.chain_id = chain_id

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, tx: dict[str, Any]) -> str:
        """
        Sign a transaction dict for this signer's chain.

        Args:
            tx: Transaction fields (ints); ``chainId`` is filled in when
                absent and must match when present. ``from`` is optional
                and must be this signer's address.

        Returns:
            0x-prefixed hex raw signed transaction

        Raises:
            ChainMismatchError: tx targets another chain
            ConfigError: tx ``from`` is not this signer
        """
        fields = dict(tx)
        tx_chain = fields.setdefault("chainId", self.chain_id)
        if int(tx_chain) != self.chain_id:
            raise ChainMismatchError(
                f"refusing to sign for chain {tx_chain}: signer is bound to chain {self.chain_id}",
                step="sign",
                details={"tx_chain_id": tx_chain, "signer_chain_id": self.chain_id},
            )

        sender = fields.pop("from", None)
        if sender is not None and sender.lower() != self.address.lower():
            raise ConfigError(
                f"transaction sender {sender} does not match signer {self.address}",
                step="sign",
            )

        signed = self._account.sign_transaction(fields)
        return "0x" + bytes(signed.raw_transaction).hex()

    def __repr__(self) -> str:
        return f"ChainSigner(address={self.address}, chain_id={self.chain_id})"


class Credential:
    """A private key, optionally pinned to an expected chain id."""

    def __init__(self, account: LocalAccount, chain_id: Optional[int] = None) -> None:
        self._account = account
        self.chain_id = chain_id

    @classmethod
    def from_private_key(cls, private_key: str, chain_id: Optional[int] = None) -> "Credential":
        """Parse a hex private key (with or without 0x).

        Raises ConfigError without echoing the key.
        """
        key = (private_key or "").strip()
        if not key.startswith("0x"):
            key = "0x" + key
        try:
            account = Account.from_key(key)
        except Exception as exc:  # eth-keys raises its own ValidationError
            raise ConfigError(
                f"PRIVATE_KEY is not a valid hex private key ({mask_secret(key)})",
                step="load_credential",
            ) from exc
        return cls(account, chain_id=chain_id)

    @property
    def address(self) -> str:
        return self._account.address

    def bind(self, chain_id: int) -> ChainSigner:
        """Bind to the chain id reported by the node.

        Raises:
            ChainMismatchError: The credential is pinned to another chain
        """
        if self.chain_id is not None and self.chain_id != chain_id:
            raise ChainMismatchError(
                f"credential is pinned to chain {self.chain_id} but the node reports chain {chain_id}",
                step="bind_chain_id",
                details={"expected_chain_id": self.chain_id, "node_chain_id": chain_id},
            )
        logger.debug("bound %s to chain %d", self.address, chain_id)
        return ChainSigner(self._account, chain_id)

    def __repr__(self) -> str:
        return f"Credential(address={self.address}, chain_id={self.chain_id})"


def get_address(private_key: Optional[str] = None) -> str:
    """
    Get the address for a private key.

    Args:
        private_key: hex private key. If None, loads from the environment.

    Returns:
        0x-prefixed checksummed address
    """
    if private_key is None:
        private_key = load_private_key()
    return Credential.from_private_key(private_key).address
