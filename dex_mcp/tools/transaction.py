"""Transaction broadcast tool."""

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


async def send_transaction(
    chain: str,
    signed_tx: str,
    *,
    access_token: Optional[str] = None,
    client=default_client,
    extra_echo: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Broadcast a signed transaction to ``chain``.

    The transaction must already be signed by the wallet owner; this adapter
    never holds keys.
    """
    label = "Failed to send transaction"
    echo = {"chain": chain, **(extra_echo or {})}
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        payload = require_text(signed_tx, "Signed transaction")
        transaction_result = await client.send_transaction(chain_id, payload, access_token=token)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error sending transaction on %s", chain)
        return error_envelope(label, exc, **echo)

    return success_envelope(**echo, transactionResult=transaction_result)
