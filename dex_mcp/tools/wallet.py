"""Wallet tools."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from dex_mcp.dex_api import DexApiError, default_client
from dex_mcp.tools.envelope import (
    ToolInputError,
    error_envelope,
    require_access_token,
    require_chain,
    require_text,
    success_envelope,
)

logger = logging.getLogger(__name__)


async def get_wallet_balance(
    chain: str,
    wallet_address: str,
    *,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """
    Return token balances held by a wallet on a chain.
    """
    label = "Failed to get wallet balance"
    echo = {"chain": chain, "walletAddress": wallet_address}
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        address = require_text(wallet_address, "Wallet address")
        balance_info = await client.fetch_wallet_balance(chain_id, address, access_token=token)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error fetching balance for %s on %s", wallet_address, chain)
        return error_envelope(label, exc, **echo)

    return success_envelope(**echo, balanceInfo=balance_info)
