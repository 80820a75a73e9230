"""
JSON-RPC helpers for Arbitrum Sepolia (or any EVM node).

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
One function per RPC method used by the tasks; quantities come back as ints.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx

from ..config import DEFAULT_RPC_TIMEOUT, DEFAULT_RPC_URL
from ..errors import NodeConnectionError, RPCError
from .abi import decode_function_result, encode_function_call

logger = logging.getLogger(__name__)

# Transaction fields sent as JSON-RPC quantities
_QUANTITY_FIELDS = ("value", "gas", "maxFeePerGas", "maxPriorityFeePerGas", "nonce")


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return (
        os.environ.get("ARBITRUM_RPC_URL")
        or os.environ.get("ARB_SEPOLIA_RPC")
        or DEFAULT_RPC_URL
    )


def _rpc_call(
    method: str,
    params: list,
    rpc_url: Optional[str] = None,
    timeout: float = DEFAULT_RPC_TIMEOUT,
) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_call")
        params: RPC parameters
        rpc_url: RPC endpoint URL
        timeout: HTTP timeout in seconds

    Returns:
        Result field from the RPC response (may be None)

    Raises:
        NodeConnectionError: Endpoint unreachable, malformed or HTTP error
        RPCError: JSON-RPC error object or invalid JSON
    """
    url = rpc_url or get_rpc_url()
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }
    logger.debug("rpc -> %s %s", method, params)

    try:
        with httpx.Client(timeout=timeout) as client:
            response = client.post(url, json=payload)
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise NodeConnectionError(
            f"RPC endpoint returned HTTP {e.response.status_code} for {method}",
            step=method,
            details={"rpc_url": url},
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise NodeConnectionError(
            f"RPC request failed: {e}",
            step=method,
            details={"rpc_url": url},
        ) from e

    try:
        data = response.json()
    except ValueError as e:
        raise RPCError(f"RPC returned invalid JSON: {e}", step=method) from e

    if not isinstance(data, dict):
        raise RPCError(
            f"RPC returned a non-object response: {type(data).__name__}", step=method
        )

    err = data.get("error")
    if err is not None:
        if not isinstance(err, dict):
            raise RPCError(f"RPC error: {err}", step=method)
        raise RPCError(
            f"RPC error: {err.get('message', 'unknown')}",
            code=err.get("code"),
            step=method,
            details={"data": err.get("data")} if err.get("data") else None,
        )

    result = data.get("result")
    logger.debug("rpc <- %s %s", method, result)
    return result


def _hex_to_int(value: Any, method: str) -> int:
    if value is None:
        raise RPCError("RPC returned null result", step=method)
    try:
        return int(value, 16)
    except (TypeError, ValueError) as e:
        raise RPCError(f"RPC returned a non-quantity: {value!r}", step=method) from e


def format_transaction(tx: dict) -> dict:
    """Render a transaction dict with int fields as JSON-RPC call arguments."""
    out: dict[str, Any] = {}
    for key in ("from", "to", "data"):
        if tx.get(key) is not None:
            out[key] = tx[key]
    for key in _QUANTITY_FIELDS:
        if tx.get(key) is not None:
            out[key] = hex(int(tx[key]))
    return out


def get_block_number(rpc_url: Optional[str] = None, **kwargs: Any) -> int:
    result = _rpc_call("eth_blockNumber", [], rpc_url=rpc_url, **kwargs)
    return _hex_to_int(result, "eth_blockNumber")


def get_chain_id(rpc_url: Optional[str] = None, **kwargs: Any) -> int:
    result = _rpc_call("eth_chainId", [], rpc_url=rpc_url, **kwargs)
    return _hex_to_int(result, "eth_chainId")


def get_balance(address: str, rpc_url: Optional[str] = None, **kwargs: Any) -> int:
    """
    Get native balance for an address.

    Args:
        address: 0x-prefixed address
        rpc_url: RPC endpoint URL

    Returns:
        Balance in wei
    """
    result = _rpc_call("eth_getBalance", [address, "latest"], rpc_url=rpc_url, **kwargs)
    return _hex_to_int(result, "eth_getBalance")


def get_nonce(address: str, rpc_url: Optional[str] = None, **kwargs: Any) -> int:
    """Transaction count including pending transactions."""
    result = _rpc_call(
        "eth_getTransactionCount", [address, "pending"], rpc_url=rpc_url, **kwargs
    )
    return _hex_to_int(result, "eth_getTransactionCount")


def get_gas_price(rpc_url: Optional[str] = None, **kwargs: Any) -> int:
    """
    Get current gas price.

    Returns:
        Gas price in wei
    """
    result = _rpc_call("eth_gasPrice", [], rpc_url=rpc_url, **kwargs)
    return _hex_to_int(result, "eth_gasPrice")


def get_max_priority_fee(rpc_url: Optional[str] = None, **kwargs: Any) -> int:
    result = _rpc_call("eth_maxPriorityFeePerGas", [], rpc_url=rpc_url, **kwargs)
    return _hex_to_int(result, "eth_maxPriorityFeePerGas")


def get_block(
    block: str = "latest", rpc_url: Optional[str] = None, **kwargs: Any
) -> Optional[dict]:
    """Block header (without transaction bodies), or None if unknown."""
    return _rpc_call("eth_getBlockByNumber", [block, False], rpc_url=rpc_url, **kwargs)


def get_fee_history(
    block_count: int,
    newest_block: str = "latest",
    reward_percentiles: Optional[list[float]] = None,
    rpc_url: Optional[str] = None,
    **kwargs: Any,
) -> dict:
    result = _rpc_call(
        "eth_feeHistory",
        [hex(block_count), newest_block, reward_percentiles or []],
        rpc_url=rpc_url,
        **kwargs,
    )
    if not isinstance(result, dict):
        raise RPCError("eth_feeHistory returned no data", step="eth_feeHistory")
    return result


def estimate_gas(tx: dict, rpc_url: Optional[str] = None, **kwargs: Any) -> int:
    result = _rpc_call("eth_estimateGas", [format_transaction(tx)], rpc_url=rpc_url, **kwargs)
    return _hex_to_int(result, "eth_estimateGas")


def send_raw_transaction(raw_tx: str, rpc_url: Optional[str] = None, **kwargs: Any) -> str:
    """
    Send a signed raw transaction.

    Args:
        raw_tx: 0x-prefixed hex encoded signed transaction

    Returns:
        Transaction hash (0x-prefixed hex)
    """
    result = _rpc_call("eth_sendRawTransaction", [raw_tx], rpc_url=rpc_url, **kwargs)
    if not result:
        raise RPCError("RPC returned null result", step="eth_sendRawTransaction")
    return result


def get_transaction_receipt(
    tx_hash: str, rpc_url: Optional[str] = None, **kwargs: Any
) -> Optional[dict]:
    """Receipt for a mined transaction, or None while it is pending."""
    return _rpc_call("eth_getTransactionReceipt", [tx_hash], rpc_url=rpc_url, **kwargs)


def read_contract(
    contract_address: str,
    function_name: str,
    abi: list,
    args: Optional[list] = None,
    rpc_url: Optional[str] = None,
    **kwargs: Any,
) -> Any:
    """
    Read from a smart contract (eth_call).

    Args:
        contract_address: 0x-prefixed contract address
        function_name: Function to call
        abi: Contract ABI containing the function
        args: Function arguments (default: [])
        rpc_url: RPC endpoint URL

    Returns:
        Decoded return value(s), or None for an empty result
    """
    calldata = encode_function_call(abi, function_name, args or [])

    result = _rpc_call(
        "eth_call",
        [{"to": contract_address, "data": calldata}, "latest"],
        rpc_url=rpc_url,
        **kwargs,
    )

    if result is None or result == "0x":
        return None

    return decode_function_result(abi, function_name, result)
