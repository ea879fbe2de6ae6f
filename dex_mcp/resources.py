"""
Resource handlers for URI-addressable DEX queries.

Each handler receives the decoded path variables and the parsed query string
of a matched ``mcp://`` URI, maps them onto the matching tool, and returns the
same envelope the tool produces.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from dex_mcp.config import DexConfig, default_config
from dex_mcp.dex_api import default_client
from dex_mcp.tools import (
    get_blockchain_list,
    get_dex_list,
    get_dexpool_detail,
    get_gainers_losers,
    get_hot_tokens,
    get_latest_block,
    get_token,
    get_top_traders,
    get_trade_list,
    get_wallet_balance,
    search_tokens,
    send_transaction,
)
from dex_mcp.tools.envelope import ToolInputError, error_envelope, require_access_token
from dex_mcp.tools.validators import PAGE_DIRECTIONS, parse_optional_int

QueryParams = Dict[str, List[str]]


def _first(query: QueryParams, key: str) -> Optional[str]:
    values = query.get(key)
    if not values:
        return None
    return values[0] or None


def _limit(query: QueryParams) -> Optional[int]:
    """Query-string limit; zero, blank, or non-numeric values count as absent."""
    return parse_optional_int(_first(query, "limit")) or None


async def read_blockchain_list(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    return await get_blockchain_list(access_token=access_token, client=client)


async def read_latest_block(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    return await get_latest_block(path["chain"], access_token=access_token, client=client)


async def read_dex_list(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    """``chains`` may be repeated or comma separated."""
    return await get_dex_list(
        query.get("chains", []),
        limit=_limit(query),
        dex_program=_first(query, "dexProgram"),
        access_token=access_token,
        client=client,
    )


async def read_dexpool_detail(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    return await get_dexpool_detail(
        path["chain"], path["poolAddress"], access_token=access_token, client=client
    )


async def read_token(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    return await get_token(path["chain"], path["tokenAddress"], access_token=access_token, client=client)


async def read_token_search(
    path: Dict[str, str],
    query: QueryParams,
    *,
    access_token: Optional[str] = None,
    client=default_client,
    config: DexConfig = default_config,
) -> Dict[str, Any]:
    """Search results are capped at ``config.max_search_resource_results``."""
    return await search_tokens(
        path["chain"],
        path["query"],
        limit=_limit(query),
        sort=_first(query, "sort"),
        sort_by=_first(query, "sortBy"),
        protocols=_first(query, "protocols"),
        cursor=_first(query, "cursor"),
        max_results=config.max_search_resource_results,
        access_token=access_token,
        client=client,
    )


async def read_hot_tokens(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    return await get_hot_tokens(
        path["chain"],
        path["duration"],
        sort_by=_first(query, "sortBy"),
        sort_direction=_first(query, "sortDirection"),
        filter_by=_first(query, "filterBy"),
        access_token=access_token,
        client=client,
    )


async def read_trade_list(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    direction = _first(query, "direction")
    if direction not in PAGE_DIRECTIONS:
        direction = None
    return await get_trade_list(
        path["chain"],
        token_address=_first(query, "tokenAddress"),
        wallet_address=_first(query, "walletAddress"),
        pool_address=_first(query, "poolAddress"),
        type=_first(query, "type"),
        before_timestamp=_first(query, "beforeTimestamp"),
        after_timestamp=_first(query, "afterTimestamp"),
        before_block_height=_first(query, "beforeBlockHeight"),
        after_block_height=_first(query, "afterBlockHeight"),
        cursor=_first(query, "cursor"),
        limit=_limit(query),
        direction=direction,
        access_token=access_token,
        client=client,
    )


async def read_top_traders(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    token_address = _first(query, "tokenAddress")
    try:
        require_access_token(access_token)
        if not token_address:
            raise ToolInputError("tokenAddress is required.")
    except ToolInputError as exc:
        return error_envelope("Failed to get top traders", exc, chain=path["chain"])
    return await get_top_traders(
        path["chain"],
        token_address,
        time_frame=_first(query, "timeFrame"),
        sort_type=_first(query, "sortType"),
        sort_by=_first(query, "sortBy"),
        cursor=_first(query, "cursor"),
        limit=_first(query, "limit"),
        direction=_first(query, "direction"),
        access_token=access_token,
        client=client,
    )


async def read_gainers_losers(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    return await get_gainers_losers(
        path["chain"],
        type=_first(query, "type"),
        sort_by=_first(query, "sortBy"),
        sort_type=_first(query, "sortType"),
        cursor=_first(query, "cursor"),
        limit=_first(query, "limit"),
        direction=_first(query, "direction"),
        access_token=access_token,
        client=client,
    )


async def read_send_transaction(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    signed_tx = _first(query, "signedTx")
    try:
        require_access_token(access_token)
        if not signed_tx:
            raise ToolInputError("signedTx query parameter is required.")
    except ToolInputError as exc:
        return error_envelope("Failed to send transaction", exc, chain=path["chain"], to=path["to"])
    return await send_transaction(
        path["chain"],
        signed_tx,
        access_token=access_token,
        client=client,
        extra_echo={"to": path["to"]},
    )


async def read_wallet_balance(
    path: Dict[str, str], query: QueryParams, *, access_token: Optional[str] = None, client=default_client
) -> Dict[str, Any]:
    return await get_wallet_balance(
        path["chain"], path["walletAddress"], access_token=access_token, client=client
    )
