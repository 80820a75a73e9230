"""
Chain - node interaction layer for arbtasks.

Provides JSON-RPC helpers, minimal ABIs, EIP-1559 fee suggestion and the
``NodeClient`` used by the transfer workflow.

Uses httpx + eth-abi instead of the heavyweight web3.py.
"""
