from __future__ import annotations

from typing import Any, Iterable, Optional

import pytest

from arbtasks.wallet.signer import ChainSigner, Credential

# Well-known throwaway key from the web3.js docs. Never fund it.
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
RECIPIENT = "0x" + "22" * 20
ARB_SEPOLIA_CHAIN_ID = 421614
TX_HASH = "0x" + "ab" * 32

_ENV_VARS = (
    "PRIVATE_KEY",
    "RECIPIENT_ADDRESS",
    "ARBITRUM_RPC_URL",
    "ARB_SEPOLIA_RPC",
    "AMOUNT_ETH",
    "CHAIN_ID",
    "RECEIPT_POLL_INTERVAL",
    "RECEIPT_TIMEOUT",
    "EXPLORER_URL",
    "RPC_TIMEOUT",
    "TOKEN_ADDRESS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's real config out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def credential() -> Credential:
    return Credential.from_private_key(PRIVATE_KEY)


class FakeChain:
    """In-memory chain client; records every call by name."""

    def __init__(
        self,
        chain_id: int = ARB_SEPOLIA_CHAIN_ID,
        balances: Optional[dict[str, int]] = None,
        block: Optional[dict] = None,
        fees: tuple[int, int] = (11, 2),
        gas_estimate: int = 21_000,
        receipts: Optional[Iterable[Any]] = None,
        failures: Optional[dict[str, Exception]] = None,
        no_block: bool = False,
    ) -> None:
        self.chain_id = chain_id
        self.balances = {k.lower(): v for k, v in (balances or {}).items()}
        self.block = None if no_block else (block if block is not None else {"base_fee_per_gas": 10})
        self.fees = fees
        self.gas_estimate = gas_estimate
        self.receipts = list(receipts) if receipts is not None else [
            {"status": "0x1", "blockNumber": "0x10", "gasUsed": "0x5208"}
        ]
        self.failures = failures or {}
        self.calls: list[str] = []
        self.sent: list[dict] = []
        self.raw_transactions: list[str] = []
        self.estimated: list[dict] = []

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    def get_balance(self, address: str) -> int:
        self._enter("get_balance")
        return self.balances.get(address.lower(), 0)

    def get_chain_id(self) -> int:
        self._enter("get_chain_id")
        return self.chain_id

    def get_block(self, block: str = "latest") -> Optional[dict]:
        self._enter("get_block")
        return self.block

    def estimate_fees(self) -> tuple[int, int]:
        self._enter("estimate_fees")
        return self.fees

    def estimate_gas(self, tx: dict) -> int:
        self._enter("estimate_gas")
        self.estimated.append(dict(tx))
        return self.gas_estimate

    def send_transaction(self, tx: dict, signer: ChainSigner) -> str:
        self._enter("send_transaction")
        self.sent.append(dict(tx))
        self.raw_transactions.append(signer.sign_transaction({**tx, "nonce": 0}))
        return TX_HASH

    def get_receipt(self, tx_hash: str) -> Optional[dict]:
        self._enter("get_receipt")
        if not self.receipts:
            return None
        item = self.receipts.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture()
def funded_chain(credential: Credential) -> FakeChain:
    return FakeChain(balances={credential.address: 10**18, RECIPIENT: 5})
