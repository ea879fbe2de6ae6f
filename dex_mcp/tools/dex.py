"""DEX listing tool."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from dex_mcp.dex_api import DexApiError, default_client
from dex_mcp.tools.envelope import (
    ToolInputError,
    check_limit,
    error_envelope,
    require_access_token,
    require_chain,
    success_envelope,
)

logger = logging.getLogger(__name__)


def _split_chains(chains: Any) -> List[str]:
    if chains is None:
        return []
    if isinstance(chains, str):
        chains = [chains]
    values: List[str] = []
    for entry in chains:
        if not isinstance(entry, str):
            values.append(entry)
            continue
        values.extend(part for part in (p.strip() for p in entry.split(",")) if part)
    return values


async def get_dex_list(
    chains: Optional[List[str]] = None,
    *,
    limit: Optional[int] = None,
    dex_program: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """
    List DEXes deployed on one or more chains.

    ``chains`` accepts a list or a comma separated string; every entry must be
    a supported chain.
    """
    label = "Failed to get DEX list"
    requested = _split_chains(chains)
    echo = {"chains": requested, "limit": limit, "dexProgram": dex_program}
    try:
        token = require_access_token(access_token)
        if not requested:
            raise ToolInputError("At least one chain is required.")
        chain_ids = [require_chain(chain) for chain in requested]
        effective_limit = check_limit(limit)
        result = await client.list_dexes(
            access_token=token,
            chains=chain_ids,
            limit=effective_limit,
            dex_program=dex_program,
        )
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error listing DEXes for %s", requested)
        return error_envelope(label, exc, **echo)

    data = result.get("data") if isinstance(result, dict) else None
    count = len(data) if isinstance(data, list) else 0
    return success_envelope(**echo, result=result, count=count)
