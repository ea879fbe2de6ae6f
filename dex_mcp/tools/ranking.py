"""Ranking tools: hot tokens and the fixed ranking lists."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from dex_mcp.config import DexConfig, default_config
from dex_mcp.dex_api import DexApiError, default_client
from dex_mcp.tools.envelope import (
    ToolInputError,
    error_envelope,
    require_access_token,
    require_chain,
    require_choice,
    success_envelope,
)
from dex_mcp.tools.validators import DURATIONS, HOT_TOKEN_SORT_FIELDS, SORT_DIRECTIONS

logger = logging.getLogger(__name__)


def _parse_filter(filter_by: Any) -> Any:
    if not isinstance(filter_by, str):
        return filter_by
    if not filter_by.strip():
        return None
    try:
        return json.loads(filter_by)
    except ValueError as exc:
        raise ToolInputError("filterBy must be valid JSON.") from exc


async def get_hot_tokens(
    chain: str,
    duration: str,
    *,
    sort_by: Optional[str] = None,
    sort_direction: Optional[str] = None,
    filter_by: Any = None,
    access_token: Optional[str] = None,
    client=default_client,
    config: DexConfig = default_config,
) -> Dict[str, Any]:
    """
    Return the hot token ranking for a chain over ``duration``.

    At most ``config.max_ranking_results`` tokens are returned; ``totalCount``
    reports how many the API produced.
    """
    label = "Failed to get hot tokens"
    echo = {"chain": chain, "duration": duration}
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        if duration not in DURATIONS:
            raise ToolInputError(
                f"Unsupported duration: {duration}. Supported durations: {', '.join(DURATIONS)}"
            )
        require_choice(sort_by, HOT_TOKEN_SORT_FIELDS, "sortBy field")
        require_choice(sort_direction, SORT_DIRECTIONS, "sortDirection")
        filters = _parse_filter(filter_by)
        hot_tokens = await client.fetch_hot_tokens(
            chain_id,
            duration,
            access_token=token,
            sort_by=sort_by or None,
            sort_direction=sort_direction or None,
            filter_by=filters or None,
        )
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error fetching hot tokens for %s/%s", chain, duration)
        return error_envelope(label, exc, **echo)

    if isinstance(hot_tokens, list):
        limited = hot_tokens[: config.max_ranking_results]
        total = len(hot_tokens)
        returned = len(limited)
    elif hot_tokens is None:
        limited, total, returned = hot_tokens, 0, 0
    else:
        # A single non-list payload counts as one result.
        limited, total, returned = hot_tokens, 1, 1
    return success_envelope(
        **echo,
        hotTokens=limited,
        totalCount=total,
        returnedCount=returned,
        searchParams={"sortBy": sort_by, "sortDirection": sort_direction, "filterBy": filter_by},
    )


async def _ranking_list(
    category: str,
    label: str,
    chain: str,
    *,
    access_token: Optional[str],
    client,
) -> Dict[str, Any]:
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        tokens = await client.fetch_ranking(chain_id, category, access_token=token)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, chain=chain)
    except Exception as exc:
        logger.exception("Unexpected error fetching %s ranking for %s", category, chain)
        return error_envelope(label, exc, chain=chain)

    count = len(tokens) if isinstance(tokens, list) else 0
    return success_envelope(chain=chain, tokens=tokens, count=count)


async def get_new_tokens(chain: str, *, access_token: Optional[str] = None, client=default_client) -> Dict[str, Any]:
    """Newest tokens listed on the chain."""
    return await _ranking_list(
        "newTokens", "Failed to get new tokens", chain, access_token=access_token, client=client
    )


async def get_stocks_tokens(chain: str, *, access_token: Optional[str] = None, client=default_client) -> Dict[str, Any]:
    """Tokenized stock assets on the chain."""
    return await _ranking_list(
        "stocks", "Failed to get stocks tokens", chain, access_token=access_token, client=client
    )


async def get_final_stretch_tokens(
    chain: str, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    """Launchpad tokens close to completing their bonding curve."""
    return await _ranking_list(
        "finalStretch", "Failed to get final stretch tokens", chain, access_token=access_token, client=client
    )


async def get_migrated_tokens(chain: str, *, access_token: Optional[str] = None, client=default_client) -> Dict[str, Any]:
    """Tokens that recently migrated from a launchpad to a DEX."""
    return await _ranking_list(
        "migrated", "Failed to get migrated tokens", chain, access_token=access_token, client=client
    )
