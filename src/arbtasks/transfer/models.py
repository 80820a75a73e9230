"""Value types for the guarded transfer workflow. All are per-invocation."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..config import DEFAULT_POLL_INTERVAL, DEFAULT_RECEIPT_TIMEOUT
from ..errors import ConfigError
from ..utils import validate_address
from ..wallet.signer import Credential


class TxStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TransferIntent:
    recipient: str
    amount: int
    credential: Credential = field(repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "recipient", validate_address(self.recipient, "RECIPIENT_ADDRESS")
        )
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ConfigError(f"amount must be an integer number of wei, got {self.amount!r}")
        if self.amount <= 0:
            raise ConfigError(
                f"amount must be greater than zero, got {self.amount}",
                details={"amount_wei": self.amount},
            )


@dataclass(frozen=True)
class FeeEnvelope:
    base_fee: int
    suggested_tip: int
    suggested_max_fee: int
    final_max_fee: int

    @property
    def min_required(self) -> int:
        return self.base_fee + self.suggested_tip


@dataclass(frozen=True)
class GasBudget:
    estimated_gas: int
    gas_limit: int


@dataclass(frozen=True)
class ReceiptWait:
    poll_interval: float = DEFAULT_POLL_INTERVAL
    timeout: float = DEFAULT_RECEIPT_TIMEOUT

    def __post_init__(self) -> None:
        for name, value in (("poll interval", self.poll_interval), ("receipt timeout", self.timeout)):
            if not math.isfinite(value) or value <= 0:
                raise ConfigError(
                    f"{name} must be a positive finite number of seconds, got {value!r}",
                    details={"poll_interval": self.poll_interval, "timeout": self.timeout},
                )
        if not math.isfinite(self.timeout / self.poll_interval):
            raise ConfigError(
                "receipt timeout is too large for the poll interval",
                details={"poll_interval": self.poll_interval, "timeout": self.timeout},
            )

    @property
    def attempts(self) -> int:
        return max(1, math.ceil(self.timeout / self.poll_interval))


def _quantity(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, str):
        return int(value, 16)
    return int(value)


@dataclass
class SubmittedTransaction:
    """A broadcast transaction and what is known about its inclusion."""

    tx_hash: str
    status: TxStatus = TxStatus.PENDING
    chain_id: Optional[int] = None
    fees: Optional[FeeEnvelope] = None
    gas: Optional[GasBudget] = None
    receipt: Optional[dict] = None

    def confirm(self, receipt: dict) -> None:
        self.receipt = receipt
        self.status = TxStatus.CONFIRMED

    @property
    def succeeded(self) -> Optional[bool]:
        """True/False once a receipt is in, None before."""
        if self.receipt is None:
            return None
        return _quantity(self.receipt.get("status")) == 1

    @property
    def block_number(self) -> Optional[int]:
        if self.receipt is None:
            return None
        return _quantity(self.receipt.get("blockNumber"))

    @property
    def gas_used(self) -> Optional[int]:
        if self.receipt is None:
            return None
        return _quantity(self.receipt.get("gasUsed"))
