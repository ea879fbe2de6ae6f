"""Trade tools: trade history, top traders, gainers/losers, and activity feeds."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from dex_mcp.config import DexConfig, default_config
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
from dex_mcp.tools.validators import PAGE_DIRECTIONS, TRADE_SIDES, clamp_limit, parse_optional_int

logger = logging.getLogger(__name__)


def _page_envelope(echo: Dict[str, Any], result: Any) -> Dict[str, Any]:
    page = result if isinstance(result, dict) else {}
    data = page.get("data")
    return success_envelope(
        **echo,
        result=result,
        count=len(data) if isinstance(data, list) else 0,
        pagination={
            "hasNext": page.get("hasNext"),
            "hasPrev": page.get("hasPrev"),
            "startCursor": page.get("startCursor"),
            "endCursor": page.get("endCursor"),
            "total": page.get("total"),
        },
    )


def _present(**values: Any) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


async def get_trade_list(
    chain: str,
    *,
    token_address: Optional[str] = None,
    wallet_address: Optional[str] = None,
    pool_address: Optional[str] = None,
    type: Optional[str] = None,
    before_timestamp: Optional[int] = None,
    after_timestamp: Optional[int] = None,
    before_block_height: Optional[int] = None,
    after_block_height: Optional[int] = None,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
    direction: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """
    List trades on a chain, optionally filtered by token, wallet, pool, side, or time window.
    """
    label = "Failed to get trade list"
    echo = _present(
        chain=chain,
        tokenAddress=token_address,
        walletAddress=wallet_address,
        poolAddress=pool_address,
        type=type,
        beforeTimestamp=before_timestamp,
        afterTimestamp=after_timestamp,
        beforeBlockHeight=before_block_height,
        afterBlockHeight=after_block_height,
        cursor=cursor,
        limit=limit,
        direction=direction,
    )
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        require_choice(type, TRADE_SIDES, "trade type")
        effective_limit = check_limit(limit)
        require_choice(direction, PAGE_DIRECTIONS, "direction")
        result = await client.fetch_trades(
            chain_id,
            access_token=token,
            tokenAddress=token_address or None,
            walletAddress=wallet_address or None,
            poolAddress=pool_address or None,
            type=type or None,
            beforeTimestamp=parse_optional_int(before_timestamp),
            afterTimestamp=parse_optional_int(after_timestamp),
            beforeBlockHeight=parse_optional_int(before_block_height),
            afterBlockHeight=parse_optional_int(after_block_height),
            cursor=cursor or None,
            limit=effective_limit,
            direction=direction or None,
        )
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error listing trades for %s", chain)
        return error_envelope(label, exc, **echo)

    return _page_envelope(echo, result)


async def get_top_traders(
    chain: str,
    token_address: str,
    *,
    time_frame: Optional[str] = None,
    sort_type: Optional[str] = None,
    sort_by: Optional[str] = None,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
    direction: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
    config: DexConfig = default_config,
) -> Dict[str, Any]:
    """
    Return the top traders of a token; defaults to 30m volume, descending.
    """
    label = "Failed to get top traders"
    echo = _present(
        chain=chain,
        tokenAddress=token_address,
        timeFrame=time_frame,
        sortType=sort_type,
        sortBy=sort_by,
        cursor=cursor,
        limit=limit,
        direction=direction,
    )
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        address = require_text(token_address, "Token address")
        require_choice(direction, PAGE_DIRECTIONS, "direction")
        result = await client.fetch_top_traders(
            chain_id,
            access_token=token,
            tokenAddress=address,
            timeFrame=time_frame or "30m",
            sortType=sort_type or "desc",
            sortBy=sort_by or "volume",
            cursor=cursor or "",
            limit=clamp_limit(limit, default=config.default_top_traders, maximum=config.max_top_traders),
            direction=direction or "next",
        )
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error fetching top traders for %s on %s", token_address, chain)
        return error_envelope(label, exc, **echo)

    return _page_envelope(echo, result)


async def get_gainers_losers(
    chain: str,
    *,
    type: Optional[str] = None,
    sort_by: Optional[str] = None,
    sort_type: Optional[str] = None,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
    direction: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
    config: DexConfig = default_config,
) -> Dict[str, Any]:
    """
    Return the top gaining and losing wallets; defaults to 1W PnL, descending.
    """
    label = "Failed to get gainers/losers"
    echo = _present(
        chain=chain,
        type=type,
        sortBy=sort_by,
        sortType=sort_type,
        cursor=cursor,
        limit=limit,
        direction=direction,
    )
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        require_choice(direction, PAGE_DIRECTIONS, "direction")
        result = await client.fetch_gainers_losers(
            chain_id,
            access_token=token,
            type=type or "1W",
            sortBy=sort_by or "PnL",
            sortType=sort_type or "desc",
            cursor=cursor or "",
            limit=clamp_limit(limit, default=config.default_top_traders, maximum=config.max_top_traders),
            direction=direction or "next",
        )
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error fetching gainers/losers for %s", chain)
        return error_envelope(label, exc, **echo)

    return _page_envelope(echo, result)


async def get_trade_activities(
    chain: str,
    *,
    token_address: Optional[str] = None,
    wallet_address: Optional[str] = None,
    pool_address: Optional[str] = None,
    type: Optional[str] = None,
    before_timestamp: Optional[int] = None,
    after_timestamp: Optional[int] = None,
    before_block_height: Optional[int] = None,
    after_block_height: Optional[int] = None,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
    direction: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
    config: DexConfig = default_config,
) -> Dict[str, Any]:
    """
    Query token activities: trades, liquidity changes, and red packet events.
    """
    label = "Failed to fetch token activities"
    filters = _present(
        tokenAddress=token_address,
        walletAddress=wallet_address,
        poolAddress=pool_address,
        type=type,
        beforeTimestamp=before_timestamp,
        afterTimestamp=after_timestamp,
        beforeBlockHeight=before_block_height,
        afterBlockHeight=after_block_height,
        cursor=cursor,
        limit=limit,
        direction=direction,
    )
    echo = {"chain": chain, "filters": filters}
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        result = await client.fetch_activities(
            chain_id,
            access_token=token,
            cursor=cursor or "",
            limit=clamp_limit(limit, default=config.default_page_limit, maximum=config.max_page_limit),
            direction=direction or "next",
            tokenAddress=token_address or None,
            walletAddress=wallet_address or None,
            poolAddress=pool_address or None,
            beforeTimestamp=parse_optional_int(before_timestamp),
            afterTimestamp=parse_optional_int(after_timestamp),
            beforeBlockHeight=parse_optional_int(before_block_height),
            afterBlockHeight=parse_optional_int(after_block_height),
            type=type or None,
        )
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error fetching activities for %s", chain)
        return error_envelope(label, exc, **echo)

    return _page_envelope(echo, result)
