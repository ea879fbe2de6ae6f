"""Shared validation helpers for DEX MCP tools."""

from __future__ import annotations

import re
from typing import Any, Optional

SUPPORTED_CHAINS = (
    "sol",
    "base",
    "bsc",
    "polygon",
    "arbitrum",
    "optimism",
    "avalanche",
    "ethereum",
    "zksync",
    "sui",
)

EVM_ADDRESS_REGEX = re.compile(r"^0x[0-9a-fA-F]{40}$")
# Solana addresses are Base58, 32-44 characters.
SOLANA_ADDRESS_REGEX = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")

DURATIONS = ("1m", "5m", "1h", "4h", "24h")

HOT_TOKEN_SORT_FIELDS = (
    "marketData.priceInUsd",
    "stats.priceChangeRatioInUsd1m",
    "stats.priceChangeRatioInUsd5m",
    "stats.priceChangeRatioInUsd1h",
    "stats.priceChangeRatioInUsd4h",
    "stats.priceChangeRatioInUsd24h",
    "marketData.marketCapInUsd",
    "marketData.tvlInUsd",
    "marketData.top10HoldingsRatio",
    "marketData.top100HoldingsRatio",
    "marketData.holders",
    "stats.trades1m",
    "stats.trades5m",
    "stats.trades1h",
    "stats.trades4h",
    "stats.trades24h",
    "stats.traders1m",
    "stats.traders5m",
    "stats.traders1h",
    "stats.traders4h",
    "stats.traders24h",
    "stats.volumesInUsd1m",
    "stats.volumesInUsd5m",
    "stats.volumesInUsd1h",
    "stats.volumesInUsd4h",
    "stats.volumesInUsd24h",
    "tokenCreatedAt",
)

TOKEN_SORT_FIELDS = (
    "marketCapInUsd",
    "liquidityInUsd",
    "priceInUsd",
    "holderCount",
    "h24VolumeInUsd",
    "h24Transactions",
    "tokenCreatedAt",
)

SORT_ORDERS = ("asc", "desc")
SORT_DIRECTIONS = ("ASC", "DESC")
TRADE_SIDES = ("BUY", "SELL")
PAGE_DIRECTIONS = ("next", "prev")
RECORD_DIRECTIONS = ("asc", "desc")
CANDLE_RESOLUTIONS = ("1s", "15s", "30s", "1m", "5m", "15m", "1h", "4h", "12h", "1d")


def is_supported_chain(value: Any) -> bool:
    """Exact, case-sensitive membership in SUPPORTED_CHAINS."""
    return isinstance(value, str) and value in SUPPORTED_CHAINS


def detect_address_type(address: Optional[str]) -> str:
    """Classify an address as ``evm``, ``solana``, or ``invalid`` by format alone."""
    if not address or not isinstance(address, str):
        return "invalid"
    value = address.strip()
    if EVM_ADDRESS_REGEX.fullmatch(value):
        return "evm"
    if SOLANA_ADDRESS_REGEX.fullmatch(value):
        return "solana"
    return "invalid"


def parse_optional_int(value: Any) -> Optional[int]:
    """Parse ints from tool args or query strings; blanks and junk become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            return int(stripped)
        except ValueError:
            return None
    return None


def clamp_limit(value: Any, *, default: int, minimum: int = 1, maximum: int) -> int:
    """
    Clamp limit-style integers to configured bounds.

    Absent or numeric-zero limits fall back to ``default``. A
    supplied value such as ``"0"`` or ``-3`` is clamped up to ``minimum``.
    """
    if not value:
        return default
    parsed = parse_optional_int(value)
    if parsed is None:
        return default
    return max(minimum, min(parsed, maximum))
