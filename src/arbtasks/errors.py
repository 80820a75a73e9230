"""
Error taxonomy for arbtasks.

Every failure is terminal for a single-shot task: nothing here is retried.
Each class carries the exit code the CLI terminates with, the workflow
step that failed and the values needed to diagnose it without re-running.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    CONFIG = "ConfigError"
    CONNECTION = "ConnectionError"
    RPC = "RPCError"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    INSUFFICIENT_FUNDS_FOR_GAS = "InsufficientFundsForGas"
    FEE_DATA_UNAVAILABLE = "FeeDataUnavailable"
    ESTIMATION_FAILED = "EstimationFailed"
    SUBMISSION_FAILED = "SubmissionFailed"
    CONFIRMATION_WAIT_FAILED = "ConfirmationWaitFailed"


class TaskError(RuntimeError):
    exit_code: int = 1
    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        *,
        step: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.step = step
        self.details = details or {}

    def describe(self) -> str:
        """One line with kind, step and message, for stderr."""
        prefix = self.kind.value if self.kind else type(self).__name__
        if self.step:
            return f"{prefix} [{self.step}]: {self}"
        return f"{prefix}: {self}"


class ConfigError(TaskError):
    """Missing or malformed credential, address or amount."""

    exit_code = 2
    kind = ErrorKind.CONFIG


class ChainMismatchError(ConfigError):
    """A credential was pinned to (or asked to sign for) another chain."""


class RPCError(TaskError):
    """The node answered with a JSON-RPC error or an unusable result."""

    exit_code = 3
    kind = ErrorKind.RPC

    def __init__(self, message: str, code: Optional[int] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.code = code


class NodeConnectionError(RPCError):
    """Endpoint unreachable, malformed, or answering with HTTP errors."""

    kind = ErrorKind.CONNECTION


class TransferError(TaskError):
    """Base for failures of the guarded transfer workflow."""


class InsufficientFundsError(TransferError):
    exit_code = 4
    kind = ErrorKind.INSUFFICIENT_FUNDS


class InsufficientFundsForGasError(TransferError):
    exit_code = 4
    kind = ErrorKind.INSUFFICIENT_FUNDS_FOR_GAS


class FeeDataUnavailableError(TransferError):
    exit_code = 5
    kind = ErrorKind.FEE_DATA_UNAVAILABLE


class EstimationFailedError(TransferError):
    exit_code = 6
    kind = ErrorKind.ESTIMATION_FAILED


class SubmissionFailedError(TransferError):
    exit_code = 7
    kind = ErrorKind.SUBMISSION_FAILED


class ConfirmationWaitFailedError(TransferError):
    """The receipt wait errored after broadcast.

    The transaction is already on the wire and may still succeed; callers
    must not resubmit it blindly. ``tx_hash`` stays valid for lookups.
    """

    exit_code = 8
    kind = ErrorKind.CONFIRMATION_WAIT_FAILED

    def __init__(self, message: str, tx_hash: str, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.tx_hash = tx_hash
