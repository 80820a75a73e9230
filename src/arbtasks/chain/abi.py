"""
Minimal contract ABIs and call encoding.

Only the read-only functions the tasks need are declared here; encoding and
decoding are delegated to eth-abi.
"""

from __future__ import annotations

from typing import Any

from eth_abi import decode, encode

from ..utils import keccak256

# HelloWeb3.hello_web3() pure returns (string)
HELLO_WEB3_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "hello_web3",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "pure",
    },
]

# ERC-20 metadata views (name, symbol, decimals)
ERC20_METADATA_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "name",
        "inputs": [],
        "outputs": [{"internalType": "string", "name": "", "type": "string"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "symbol",
        "inputs": [],
        "outputs": [{"internalType": "string", "name": "", "type": "string"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "decimals",
        "inputs": [],
        "outputs": [{"internalType": "uint8", "name": "", "type": "uint8"}],
        "stateMutability": "view",
    },
]


def find_function(abi: list, function_name: str) -> dict:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def function_selector(function_name: str, input_types: list[str]) -> bytes:
    """First 4 bytes of keccak256 of the canonical signature."""
    sig = f"{function_name}({','.join(input_types)})"
    return keccak256(sig.encode("utf-8"))[:4]


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    selector = function_selector(function_name, input_types)
    encoded_args = encode(input_types, args) if args else b""
    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        Decoded result (single value or tuple), None for no outputs
    """
    func = find_function(abi, function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded
