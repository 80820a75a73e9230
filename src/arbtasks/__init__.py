__all__ = [
    # Errors
    "ErrorKind",
    "TaskError",
    "ConfigError",
    "ChainMismatchError",
    "RPCError",
    "NodeConnectionError",
    "TransferError",
    "InsufficientFundsError",
    "InsufficientFundsForGasError",
    "FeeDataUnavailableError",
    "EstimationFailedError",
    "SubmissionFailedError",
    "ConfirmationWaitFailedError",
    # Config
    "Settings",
    "load_settings",
    "parse_amount",
    # Chain
    "NodeClient",
    # Wallet
    "Credential",
    "ChainSigner",
    # Transfer workflow
    "ChainClient",
    "GuardedTransfer",
    "TransferIntent",
    "FeeEnvelope",
    "GasBudget",
    "ReceiptWait",
    "SubmittedTransaction",
    "TxStatus",
]

from .errors import (
    ChainMismatchError,
    ConfigError,
    ConfirmationWaitFailedError,
    ErrorKind,
    EstimationFailedError,
    FeeDataUnavailableError,
    InsufficientFundsError,
    InsufficientFundsForGasError,
    NodeConnectionError,
    RPCError,
    SubmissionFailedError,
    TaskError,
    TransferError,
)
from .config import Settings, load_settings, parse_amount
from .chain.client import NodeClient
from .wallet.signer import ChainSigner, Credential
from .transfer import (
    ChainClient,
    FeeEnvelope,
    GasBudget,
    GuardedTransfer,
    ReceiptWait,
    SubmittedTransaction,
    TransferIntent,
    TxStatus,
)
