"""
Fee and gas safety margins.

Both margins are +20% in integer arithmetic. The fee side biases toward
overpaying: a max fee below the base fee at inclusion time stalls the
transaction instead of failing it. The gas side rounds up so the limit is
always strictly above a non-zero estimate.
"""

from __future__ import annotations

from ..errors import InsufficientFundsError, InsufficientFundsForGasError
from ..utils import format_ether
from .models import FeeEnvelope, GasBudget

MARGIN_NUM = 12
MARGIN_DEN = 10


def compute_fee_envelope(base_fee: int, suggested_tip: int, suggested_max_fee: int) -> FeeEnvelope:
    floor = base_fee + suggested_tip
    final = max(suggested_max_fee, floor) * MARGIN_NUM // MARGIN_DEN
    return FeeEnvelope(
        base_fee=base_fee,
        suggested_tip=suggested_tip,
        suggested_max_fee=suggested_max_fee,
        final_max_fee=final,
    )


def compute_gas_budget(estimated_gas: int) -> GasBudget:
    gas_limit = -(-estimated_gas * MARGIN_NUM // MARGIN_DEN)
    return GasBudget(estimated_gas=estimated_gas, gas_limit=gas_limit)


def worst_case_cost(amount: int, gas: GasBudget, fees: FeeEnvelope) -> int:
    return amount + gas.gas_limit * fees.final_max_fee


def check_balance_covers_amount(amount: int, balance: int) -> None:
    if amount > balance:
        raise InsufficientFundsError(
            f"insufficient balance: need {format_ether(amount)} ETH, "
            f"have {format_ether(balance)} ETH",
            step="balance_check",
            details={"amount_wei": amount, "balance_wei": balance},
        )


def check_balance_covers_worst_case(
    amount: int, gas: GasBudget, fees: FeeEnvelope, balance: int
) -> int:
    """Return the worst-case total, raising if the balance cannot cover it."""
    total = worst_case_cost(amount, gas, fees)
    if total > balance:
        raise InsufficientFundsForGasError(
            f"insufficient balance including max gas: need {format_ether(total)} ETH, "
            f"have {format_ether(balance)} ETH",
            step="gas_balance_check",
            details={
                "amount_wei": amount,
                "gas_limit": gas.gas_limit,
                "max_fee_per_gas": fees.final_max_fee,
                "total_wei": total,
                "balance_wei": balance,
            },
        )
    return total
