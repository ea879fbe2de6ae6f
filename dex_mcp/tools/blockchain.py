"""Blockchain tools: supported networks and latest block."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from dex_mcp.dex_api import DexApiError, default_client
from dex_mcp.tools.envelope import (
    ToolInputError,
    error_envelope,
    require_access_token,
    require_chain,
    success_envelope,
)

logger = logging.getLogger(__name__)


async def get_blockchain_list(
    *,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """
    List the blockchains supported by the DEX API.
    """
    label = "Failed to get blockchain list"
    try:
        token = require_access_token(access_token)
        blockchains = await client.fetch_supported_blockchains(access_token=token)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc)
    except Exception as exc:
        logger.exception("Unexpected error fetching blockchain list")
        return error_envelope(label, exc)

    count = len(blockchains) if isinstance(blockchains, list) else 0
    return success_envelope(blockchains=blockchains, count=count)


async def get_latest_block(
    chain: str,
    *,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """
    Return the latest block (hash and height) for a chain.
    """
    label = "Failed to get latest block information"
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        latest_block = await client.fetch_latest_block(chain_id, access_token=token)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, chain=chain)
    except Exception as exc:
        logger.exception("Unexpected error fetching latest block for %s", chain)
        return error_envelope(label, exc, chain=chain)

    return success_envelope(chain=chain, latestBlock=latest_block)
