"""DEX pool tools."""

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


async def get_dexpool_detail(
    chain: str,
    pool_address: str,
    *,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """Return liquidity, reserves, and fee details for a single pool."""
    label = "Failed to get DEX pool detail"
    echo = {"chain": chain, "poolAddress": pool_address}
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        address = require_text(pool_address, "Pool address")
        pool_detail = await client.fetch_dexpool(chain_id, address, access_token=token)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error fetching pool %s on %s", pool_address, chain)
        return error_envelope(label, exc, **echo)

    return success_envelope(**echo, poolDetail=pool_detail)
