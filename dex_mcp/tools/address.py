"""Address utilities that never touch the upstream API."""

from __future__ import annotations

from typing import Any, Dict

from dex_mcp.tools.envelope import success_envelope
from dex_mcp.tools.validators import detect_address_type as classify_address


def detect_address_type(address: str) -> Dict[str, Any]:
    """Classify an address as evm, solana, or invalid by format alone."""
    return success_envelope(address=address, addressType=classify_address(address))
