"""Environment configuration loading."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .utils import ETHER_DECIMALS, parse_units

DEFAULT_RPC_URL = "https://sepolia-rollup.arbitrum.io/rpc"
DEFAULT_EXPLORER_URL = "https://sepolia.arbiscan.io"
DEFAULT_AMOUNT_ETH = "0.001"
DEFAULT_POLL_INTERVAL = 0.25
DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_RPC_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    explorer_url: str = DEFAULT_EXPLORER_URL
    amount_eth: str = DEFAULT_AMOUNT_ETH
    recipient: Optional[str] = None
    private_key: Optional[str] = field(default=None, repr=False)
    chain_id: Optional[int] = None
    poll_interval: float = DEFAULT_POLL_INTERVAL
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT


def load_env(env_path: Optional[Path] = None) -> None:
    """Load a .env file (default: ./.env) without overriding the real env."""
    if env_path is not None:
        if env_path.exists():
            load_dotenv(env_path, override=False)
        return
    load_dotenv(override=False)


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise ConfigError(f"{name} must be a positive finite number, got {raw!r}")
    return value


def _optional_int(env: Mapping[str, str], name: str) -> Optional[int]:
    raw = env.get(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw, 0)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment.

    Nothing here is required: each command checks for the values it needs,
    so read-only tasks run without a private key.
    """
    env = os.environ if environ is None else environ

    rpc_url = (
        env.get("ARBITRUM_RPC_URL", "").strip()
        or env.get("ARB_SEPOLIA_RPC", "").strip()
        or DEFAULT_RPC_URL
    )

    return Settings(
        rpc_url=rpc_url,
        explorer_url=env.get("EXPLORER_URL", "").strip() or DEFAULT_EXPLORER_URL,
        amount_eth=env.get("AMOUNT_ETH", "").strip() or DEFAULT_AMOUNT_ETH,
        recipient=env.get("RECIPIENT_ADDRESS", "").strip() or None,
        private_key=env.get("PRIVATE_KEY", "").strip() or None,
        chain_id=_optional_int(env, "CHAIN_ID"),
        poll_interval=_float(env, "RECEIPT_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
        receipt_timeout=_float(env, "RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT),
        rpc_timeout=_float(env, "RPC_TIMEOUT", DEFAULT_RPC_TIMEOUT),
    )


def parse_amount(amount_eth: str) -> int:
    """Parse a whole-ether decimal string into wei.

    Raises ConfigError for malformed or non-positive amounts.
    """
    try:
        wei = parse_units(amount_eth, ETHER_DECIMALS)
    except ValueError as exc:
        raise ConfigError(
            f"AMOUNT_ETH is not a valid amount (e.g. 0.001): {exc}",
            details={"amount_eth": amount_eth},
        ) from exc
    if wei <= 0:
        raise ConfigError(
            f"AMOUNT_ETH must be greater than zero, got {amount_eth!r}",
            details={"amount_eth": amount_eth},
        )
    return wei
