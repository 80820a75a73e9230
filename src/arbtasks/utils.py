from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation, localcontext

from eth_hash.auto import keccak

from .errors import ConfigError

logger = logging.getLogger(__name__)

ETHER_DECIMALS = 18
GWEI_DECIMALS = 9

_HEX_ADDRESS = re.compile(r"^(0x)?[0-9a-fA-F]{40}$")


def keccak256(data: bytes) -> bytes:
    # Keccak-256, not NIST SHA3-256. Never use hashlib.sha3_256 here.
    return keccak(data)


def parse_units(value: str, decimals: int) -> int:
    """Convert a decimal string in whole units to integer minor units.

    Raises ValueError for non-numeric input or more fractional digits than
    the unit supports (no silent truncation).
    """
    with localcontext() as ctx:
        ctx.prec = 80
        try:
            amount = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(f"not a decimal number: {value!r}") from exc
        if not amount.is_finite():
            raise ValueError(f"not a finite number: {value!r}")
        scaled = amount.scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValueError(f"{value!r} has more than {decimals} decimal places")
        return int(scaled)


def format_units(value: int, decimals: int) -> str:
    with localcontext() as ctx:
        ctx.prec = 80
        text = format(Decimal(value).scaleb(-decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def format_ether(wei: int) -> str:
    return format_units(wei, ETHER_DECIMALS)


def format_gwei(wei: int) -> str:
    return format_units(wei, GWEI_DECIMALS)


def to_checksum_address(address: str) -> str:
    """EIP-55 checksum an address (accepts with or without 0x)."""
    addr = address.lower().replace("0x", "")
    addr_hash = keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result


def validate_address(address: str, field: str = "address") -> str:
    """Validate a hex address and return it checksummed.

    Any letter case is accepted (checksummed or not); a mixed-case address
    whose EIP-55 checksum does not match is logged, not rejected.
    """
    candidate = (address or "").strip()
    if not _HEX_ADDRESS.match(candidate):
        raise ConfigError(
            f"{field} is not a valid address: {address!r}",
            details={field: address},
        )
    body = candidate[2:] if candidate.startswith("0x") else candidate
    checksummed = to_checksum_address(body)
    if body != body.lower() and body != body.upper() and checksummed[2:] != body:
        logger.warning("%s %s does not match its EIP-55 checksum %s", field, candidate, checksummed)
    return checksummed


def mask_secret(secret: str, keep: int = 4) -> str:
    """Show only the edges of a secret, e.g. ``0x1234…cdef``."""
    body = secret[2:] if secret.startswith("0x") else secret
    if len(body) <= keep * 2:
        return "***"
    return f"0x{body[:keep]}…{body[-keep:]}"


def explorer_tx_url(explorer_url: str, tx_hash: str) -> str:
    return f"{explorer_url.rstrip('/')}/tx/{tx_hash}"
