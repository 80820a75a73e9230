from __future__ import annotations

from contextlib import contextmanager
from typing import Any
from unittest.mock import MagicMock, patch

import httpx
import pytest

from arbtasks.chain import rpc
from arbtasks.chain.abi import ERC20_METADATA_ABI, HELLO_WEB3_ABI, encode_function_call
from arbtasks.errors import NodeConnectionError, RPCError

from eth_abi import encode

RPC_URL = "https://sepolia-rollup.arbitrum.io/rpc"


def _response(payload: Any = None, status_code: int = 200, text: str | None = None) -> httpx.Response:
    request = httpx.Request("POST", RPC_URL)
    if text is not None:
        return httpx.Response(status_code, text=text, request=request)
    return httpx.Response(status_code, json=payload, request=request)


def _result(value: Any) -> httpx.Response:
    return _response({"jsonrpc": "2.0", "id": 1, "result": value})


@contextmanager
def mock_node(*responses: Any):
    """Patch httpx.Client so each post returns (or raises) the next item."""
    client = MagicMock()
    client.post.side_effect = list(responses)
    cm = MagicMock()
    cm.__enter__.return_value = client
    cm.__exit__.return_value = False
    with patch("arbtasks.chain.rpc.httpx.Client", return_value=cm):
        yield client


def _sent(client: MagicMock, index: int = 0) -> dict:
    return client.post.call_args_list[index].kwargs["json"]


class TestRpcCall:
    def test_payload_shape(self) -> None:
        with mock_node(_result("0x1")) as client:
            rpc.get_block_number(rpc_url=RPC_URL)
        assert client.post.call_args.args[0] == RPC_URL
        assert _sent(client) == {"jsonrpc": "2.0", "method": "eth_blockNumber", "params": [], "id": 1}

    def test_rpc_error_object(self) -> None:
        body = {"jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "method not found"}}
        with mock_node(_response(body)):
            with pytest.raises(RPCError, match="method not found") as excinfo:
                rpc.get_chain_id(rpc_url=RPC_URL)
        assert excinfo.value.code == -32601
        assert excinfo.value.step == "eth_chainId"
        assert not isinstance(excinfo.value, NodeConnectionError)

    def test_plain_string_error(self) -> None:
        with mock_node(_response({"error": "rate limited"})):
            with pytest.raises(RPCError, match="rate limited") as excinfo:
                rpc.get_chain_id(rpc_url=RPC_URL)
        assert excinfo.value.code is None
        assert excinfo.value.exit_code == 3

    def test_non_object_body(self) -> None:
        with mock_node(_response([{"jsonrpc": "2.0", "id": 1, "result": "0x1"}])):
            with pytest.raises(RPCError, match="non-object response"):
                rpc.get_chain_id(rpc_url=RPC_URL)

    def test_transport_error(self) -> None:
        with mock_node(httpx.ConnectError("connection refused")):
            with pytest.raises(NodeConnectionError, match="RPC request failed"):
                rpc.get_balance("0x" + "11" * 20, rpc_url=RPC_URL)

    def test_http_status_error(self) -> None:
        with mock_node(_response(status_code=502, text="bad gateway")):
            with pytest.raises(NodeConnectionError, match="HTTP 502"):
                rpc.get_gas_price(rpc_url=RPC_URL)

    def test_invalid_json(self) -> None:
        with mock_node(_response(status_code=200, text="<html>")):
            with pytest.raises(RPCError, match="invalid JSON"):
                rpc.get_gas_price(rpc_url=RPC_URL)

    def test_null_quantity(self) -> None:
        with mock_node(_result(None)):
            with pytest.raises(RPCError, match="null result"):
                rpc.get_balance("0x" + "11" * 20, rpc_url=RPC_URL)

    def test_env_rpc_url(self, monkeypatch) -> None:
        monkeypatch.setenv("ARBITRUM_RPC_URL", "http://localhost:8547")
        with mock_node(_result("0x1")) as client:
            rpc.get_block_number()
        assert client.post.call_args.args[0] == "http://localhost:8547"


class TestQueries:
    def test_quantities(self) -> None:
        with mock_node(_result("0x66eee"), _result("0xde0b6b3a7640000"), _result("0x5f5e100")):
            assert rpc.get_chain_id(rpc_url=RPC_URL) == 421614
            assert rpc.get_balance("0x" + "11" * 20, rpc_url=RPC_URL) == 10**18
            assert rpc.get_gas_price(rpc_url=RPC_URL) == 100_000_000

    def test_balance_params(self) -> None:
        address = "0x" + "11" * 20
        with mock_node(_result("0x0")) as client:
            rpc.get_balance(address, rpc_url=RPC_URL)
        assert _sent(client)["params"] == [address, "latest"]

    def test_nonce_counts_pending(self) -> None:
        with mock_node(_result("0x7")) as client:
            assert rpc.get_nonce("0x" + "11" * 20, rpc_url=RPC_URL) == 7
        assert _sent(client)["params"][1] == "pending"

    def test_get_block(self) -> None:
        block = {"number": "0x10", "baseFeePerGas": "0x5f5e100"}
        with mock_node(_result(block)) as client:
            assert rpc.get_block(rpc_url=RPC_URL) == block
        assert _sent(client)["params"] == ["latest", False]

    def test_fee_history_params(self) -> None:
        with mock_node(_result({"baseFeePerGas": ["0x1"], "reward": [["0x1"]]})) as client:
            rpc.get_fee_history(10, "latest", [5.0], rpc_url=RPC_URL)
        assert _sent(client)["params"] == ["0xa", "latest", [5.0]]

    def test_estimate_gas_formats_quantities(self) -> None:
        tx = {
            "type": 2,
            "chainId": 421614,
            "from": "0x" + "11" * 20,
            "to": "0x" + "22" * 20,
            "value": 10**15,
            "maxFeePerGas": 14,
            "maxPriorityFeePerGas": 2,
        }
        with mock_node(_result("0x5208")) as client:
            assert rpc.estimate_gas(tx, rpc_url=RPC_URL) == 21_000
        assert _sent(client)["params"] == [
            {
                "from": "0x" + "11" * 20,
                "to": "0x" + "22" * 20,
                "value": hex(10**15),
                "maxFeePerGas": "0xe",
                "maxPriorityFeePerGas": "0x2",
            }
        ]

    def test_send_raw_transaction(self) -> None:
        tx_hash = "0x" + "ab" * 32
        with mock_node(_result(tx_hash)) as client:
            assert rpc.send_raw_transaction("0x02f8", rpc_url=RPC_URL) == tx_hash
        assert _sent(client)["params"] == ["0x02f8"]

    def test_pending_receipt_is_none(self) -> None:
        with mock_node(_result(None)):
            assert rpc.get_transaction_receipt("0x" + "ab" * 32, rpc_url=RPC_URL) is None


class TestReadContract:
    def test_decodes_string(self) -> None:
        encoded = "0x" + encode(["string"], ["Hello Web3!"]).hex()
        with mock_node(_result(encoded)) as client:
            value = rpc.read_contract("0x" + "33" * 20, "hello_web3", HELLO_WEB3_ABI, rpc_url=RPC_URL)
        assert value == "Hello Web3!"
        call = _sent(client)["params"][0]
        assert call["to"] == "0x" + "33" * 20
        assert call["data"] == encode_function_call(HELLO_WEB3_ABI, "hello_web3", [])

    def test_decodes_uint8(self) -> None:
        encoded = "0x" + encode(["uint8"], [6]).hex()
        with mock_node(_result(encoded)):
            assert rpc.read_contract("0x" + "33" * 20, "decimals", ERC20_METADATA_ABI, rpc_url=RPC_URL) == 6

    def test_empty_result(self) -> None:
        with mock_node(_result("0x")):
            assert rpc.read_contract("0x" + "33" * 20, "name", ERC20_METADATA_ABI, rpc_url=RPC_URL) is None
