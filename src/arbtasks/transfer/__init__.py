"""
Transfer - guarded native-currency transfer with EIP-1559 fees.

``GuardedTransfer.run`` is the entry point; ``policy`` holds the fee/gas
margins and both balance checks.
"""

from .models import (
    FeeEnvelope,
    GasBudget,
    ReceiptWait,
    SubmittedTransaction,
    TransferIntent,
    TxStatus,
)
from .policy import compute_fee_envelope, compute_gas_budget, worst_case_cost
from .workflow import ChainClient, GuardedTransfer

__all__ = [
    "ChainClient",
    "FeeEnvelope",
    "GasBudget",
    "GuardedTransfer",
    "ReceiptWait",
    "SubmittedTransaction",
    "TransferIntent",
    "TxStatus",
    "compute_fee_envelope",
    "compute_gas_budget",
    "worst_case_cost",
]
