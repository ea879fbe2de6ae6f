"""Token tools: info, search, metadata, pools, stats, holders, and candles."""

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
    require_choice,
    require_text,
    success_envelope,
)
from dex_mcp.tools.validators import (
    CANDLE_RESOLUTIONS,
    PAGE_DIRECTIONS,
    SORT_ORDERS,
    TOKEN_SORT_FIELDS,
    parse_optional_int,
)

logger = logging.getLogger(__name__)


def _normalize_protocols(protocols: Any) -> Optional[List[str]]:
    if protocols is None or protocols == "":
        return None
    if isinstance(protocols, str):
        protocols = protocols.split(",")
    values = [str(item).strip() for item in protocols if str(item).strip()]
    return values or None


def _trim_results(results: Any, max_results: int) -> tuple[Any, int, int]:
    """
    Cut ``results`` to ``max_results`` items.

    A ``{"data": [...], "total": n}`` page is flattened to its data list and
    the total comes from the upstream ``total`` when it is an integer.
    """
    if isinstance(results, list):
        return results[:max_results], len(results), min(len(results), max_results)
    if isinstance(results, dict) and isinstance(results.get("data"), list):
        data = results["data"]
        total = results.get("total")
        if not isinstance(total, int) or isinstance(total, bool):
            total = len(data)
        return data[:max_results], total, min(len(data), max_results)
    return results, 0, 0


async def get_token(
    chain: str,
    token_address: str,
    *,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """
    Return token information (name, symbol, decimals, market data) for an address.
    """
    label = "Failed to get token information"
    echo = {"chain": chain, "tokenAddress": token_address}
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        address = require_text(token_address, "Token address")
        token_info = await client.fetch_token(chain_id, address, access_token=token)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error fetching token %s on %s", token_address, chain)
        return error_envelope(label, exc, **echo)

    return success_envelope(**echo, tokenInfo=token_info)


async def search_tokens(
    chain: str,
    query: str,
    *,
    limit: Optional[int] = None,
    sort: Optional[str] = None,
    sort_by: Optional[str] = None,
    protocols: Optional[List[str]] = None,
    cursor: Optional[str] = None,
    max_results: Optional[int] = None,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """
    Search tokens on a chain by keyword (name, symbol, or address).

    When ``max_results`` is set the result list is trimmed and the envelope
    gains ``totalCount`` and ``returnedCount``.
    """
    label = "Failed to search tokens"
    echo = {"chain": chain, "query": query}
    protocol_list = _normalize_protocols(protocols)
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        keyword = require_text(query, "Search query")
        effective_limit = check_limit(limit)
        require_choice(sort, SORT_ORDERS, "sort")
        require_choice(sort_by, TOKEN_SORT_FIELDS, "sortBy field")
        results = await client.search_tokens(
            access_token=token,
            chains=[chain_id],
            q=keyword,
            limit=effective_limit,
            sort=sort or None,
            sort_by=sort_by or None,
            protocols=protocol_list,
            cursor=cursor or None,
        )
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error searching tokens for %r on %s", query, chain)
        return error_envelope(label, exc, **echo)

    search_params = {
        "limit": limit,
        "sort": sort,
        "sortBy": sort_by,
        "protocols": protocol_list,
        "cursor": cursor,
    }
    if max_results is None:
        return success_envelope(**echo, results=results, searchParams=search_params)

    trimmed, total, returned = _trim_results(results, max_results)
    return success_envelope(
        **echo,
        results=trimmed,
        totalCount=total,
        returnedCount=returned,
        searchParams=search_params,
    )


async def _token_detail(
    fetch_name: str,
    result_field: str,
    label: str,
    chain: str,
    token_address: str,
    *,
    access_token: Optional[str],
    client,
    **kwargs: Any,
) -> Dict[str, Any]:
    echo = {"chain": chain, "tokenAddress": token_address}
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        address = require_text(token_address, "Token address")
        fetch = getattr(client, fetch_name)
        payload = await fetch(chain_id, address, access_token=token, **kwargs)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error in %s for %s on %s", fetch_name, token_address, chain)
        return error_envelope(label, exc, **echo)

    return success_envelope(**echo, **{result_field: payload})


async def get_token_metadata(
    chain: str,
    token_address: str,
    *,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    return await _token_detail(
        "fetch_token_metadata",
        "metadata",
        "Failed to get token metadata",
        chain,
        token_address,
        access_token=access_token,
        client=client,
    )


async def get_token_pools(
    chain: str,
    token_address: str,
    *,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """Liquidity pools that hold the token."""
    return await _token_detail(
        "fetch_token_pools",
        "pools",
        "Failed to get token pools",
        chain,
        token_address,
        access_token=access_token,
        client=client,
    )


async def get_token_stats(
    chain: str,
    token_address: str,
    *,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    return await _token_detail(
        "fetch_token_stats",
        "stats",
        "Failed to get token stats",
        chain,
        token_address,
        access_token=access_token,
        client=client,
    )


async def get_token_holders(
    chain: str,
    token_address: str,
    *,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
    direction: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """Paged list of holders; ``direction`` is ``next`` or ``prev``."""
    label = "Failed to get token holders"
    try:
        require_access_token(access_token)
        require_chain(chain)
        effective_limit = check_limit(limit)
        require_choice(direction, PAGE_DIRECTIONS, "direction")
    except ToolInputError as exc:
        return error_envelope(label, exc, chain=chain, tokenAddress=token_address)
    return await _token_detail(
        "fetch_token_holders",
        "holders",
        label,
        chain,
        token_address,
        access_token=access_token,
        client=client,
        cursor=cursor or None,
        limit=effective_limit,
        direction=direction or None,
    )


async def get_token_candles(
    chain: str,
    token_address: str,
    resolution: str,
    *,
    from_time: Optional[int] = None,
    to_time: Optional[int] = None,
    limit: Optional[int] = None,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """OHLCV candles for the token at ``resolution`` (for example ``1h``)."""
    label = "Failed to get token candles"
    try:
        require_access_token(access_token)
        require_chain(chain)
        if not resolution:
            raise ToolInputError("Resolution is required.")
        require_choice(resolution, CANDLE_RESOLUTIONS, "resolution")
        effective_limit = check_limit(limit)
    except ToolInputError as exc:
        return error_envelope(label, exc, chain=chain, tokenAddress=token_address)
    return await _token_detail(
        "fetch_token_candles",
        "candles",
        label,
        chain,
        token_address,
        access_token=access_token,
        client=client,
        resolution=resolution,
        from_time=parse_optional_int(from_time),
        to_time=parse_optional_int(to_time),
        limit=effective_limit,
    )
