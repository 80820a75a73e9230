"""
EIP-1559 fee suggestion.

Derives a (max_fee, tip) pair from ``eth_feeHistory``: the tip is the median
of recent low-percentile rewards and the max fee is the next block's base fee
surged by a tiered multiplier plus that tip.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..errors import FeeDataUnavailableError, NodeConnectionError, RPCError
from .rpc import get_fee_history, get_max_priority_fee

logger = logging.getLogger(__name__)

GWEI = 10**9

FEE_HISTORY_BLOCKS = 10
REWARD_PERCENTILE = 5.0
DEFAULT_PRIORITY_FEE = 3 * GWEI

# (upper bound of base fee, multiplier numerator, denominator)
_SURGE_TIERS = (
    (40 * GWEI, 2, 1),
    (100 * GWEI, 16, 10),
    (200 * GWEI, 14, 10),
)


def surge_base_fee(base_fee: int) -> int:
    for bound, num, den in _SURGE_TIERS:
        if base_fee <= bound:
            return base_fee * num // den
    return base_fee * 12 // 10


def _median_reward(history: dict) -> Optional[int]:
    rewards = sorted(
        int(block_rewards[0], 16)
        for block_rewards in history.get("reward") or []
        if block_rewards
    )
    rewards = [r for r in rewards if r > 0]
    if not rewards:
        return None
    return rewards[len(rewards) // 2]


def estimate_fees(rpc_url: Optional[str] = None, **kwargs: Any) -> tuple[int, int]:
    """
    Suggest EIP-1559 fees for the next block.

    Returns:
        Tuple of (max_fee_per_gas, max_priority_fee_per_gas) in wei

    Raises:
        FeeDataUnavailableError: The node reports no base fees
    """
    history = get_fee_history(
        FEE_HISTORY_BLOCKS, "latest", [REWARD_PERCENTILE], rpc_url=rpc_url, **kwargs
    )

    base_fees = history.get("baseFeePerGas") or []
    if not base_fees:
        raise FeeDataUnavailableError(
            "eth_feeHistory returned no baseFeePerGas (EIP-1559 unsupported?)",
            step="estimate_fees",
        )
    # The last entry is the base fee of the next (pending) block
    base_fee = int(base_fees[-1], 16)

    tip = _median_reward(history)
    if tip is None:
        try:
            tip = get_max_priority_fee(rpc_url=rpc_url, **kwargs)
        except NodeConnectionError:
            raise
        except RPCError as exc:
            logger.debug("eth_maxPriorityFeePerGas unavailable (%s), using default tip", exc)
            tip = DEFAULT_PRIORITY_FEE

    max_fee = surge_base_fee(base_fee) + tip
    logger.debug("fee suggestion: base=%d tip=%d max=%d", base_fee, tip, max_fee)
    return max_fee, tip
