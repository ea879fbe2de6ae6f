"""
Lightweight JSON-RPC surface for MCP-style tooling.

This maps tool names, resource URI templates, and prompt names onto the
implementations in ``dex_mcp.tools``, ``dex_mcp.resources`` and
``dex_mcp.prompts``. It is stateless; the caller supplies the bearer token
for every call.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Pattern
from urllib.parse import parse_qs, unquote

from dex_mcp import resources
from dex_mcp.config import default_config
from dex_mcp.prompts import PROMPTS, PromptArgumentError, PromptDefinition, describe_prompt, render_prompt
from dex_mcp.tools import (
    claim_redpacket,
    create_redpacket,
    detect_address_type,
    get_blockchain_list,
    get_dex_list,
    get_dexpool_detail,
    get_final_stretch_tokens,
    get_gainers_losers,
    get_hot_tokens,
    get_latest_block,
    get_migrated_tokens,
    get_new_tokens,
    get_redpacket,
    get_redpacket_claims,
    get_redpacket_claims_by_address,
    get_redpackets_by_address,
    get_stocks_tokens,
    get_token,
    get_token_candles,
    get_token_holders,
    get_token_metadata,
    get_token_pools,
    get_token_stats,
    get_top_traders,
    get_trade_activities,
    get_trade_list,
    get_wallet_balance,
    list_redpackets,
    search_tokens,
    send_redpacket,
    send_transaction,
)
from dex_mcp.tools.envelope import error_envelope
from dex_mcp.tools.validators import (
    CANDLE_RESOLUTIONS,
    DURATIONS,
    HOT_TOKEN_SORT_FIELDS,
    PAGE_DIRECTIONS,
    RECORD_DIRECTIONS,
    SORT_DIRECTIONS,
    SORT_ORDERS,
    SUPPORTED_CHAINS,
    TOKEN_SORT_FIELDS,
    TRADE_SIDES,
)

logger = logging.getLogger(__name__)

__all__ = [
    "PromptArgumentError",
    "TOOL_REGISTRY",
    "RESOURCE_REGISTRY",
    "PROMPT_REGISTRY",
    "list_tools",
    "call_tool",
    "list_resource_templates",
    "list_resources",
    "read_resource",
    "list_prompts",
    "get_prompt",
]


def _chain_schema() -> Dict[str, Any]:
    return {
        "type": "string",
        "description": f"Chain name ({', '.join(SUPPORTED_CHAINS)})",
        "enum": list(SUPPORTED_CHAINS),
    }


def _string(description: str, **extra: Any) -> Dict[str, Any]:
    return {"type": "string", "description": description, **extra}


def _enum(description: str, values) -> Dict[str, Any]:
    return {"type": "string", "description": description, "enum": list(values)}


def _limit_schema(max_value: int, *, minimum: int = 1) -> Dict[str, Any]:
    return {
        "type": "integer",
        "minimum": minimum,
        "maximum": max_value,
        "description": f"Optional max items ({minimum}-{max_value})",
    }


def _object(properties: Dict[str, Any], required: List[str]) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
    }


def _read_only(title: str) -> Dict[str, Any]:
    return {
        "title": title,
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False,
    }


def _write(title: str, *, destructive: bool = False) -> Dict[str, Any]:
    return {
        "title": title,
        "readOnlyHint": False,
        "destructiveHint": destructive,
        "idempotentHint": False,
        "openWorldHint": False,
    }


ToolCallable = Callable[..., Awaitable[Any]] | Callable[..., Any]


@dataclass(slots=True)
class ToolDefinition:
    name: str
    description: str
    params: Dict[str, Any]
    input_schema: Dict[str, Any]
    annotations: Dict[str, Any]
    callable: ToolCallable
    requires_auth: bool = True


TOKEN_ADDRESS = _string("Token contract or mint address")
PAGE_CURSOR = _string("Pagination cursor")
MAX_PAGE = default_config.max_page_limit
MAX_TOP = default_config.max_top_traders

_TRADE_FILTERS = {
    "token_address": _string("Filter by token address"),
    "wallet_address": _string("Filter by wallet address"),
    "pool_address": _string("Filter by pool address"),
    "before_timestamp": {"type": "integer", "description": "Only trades before this Unix timestamp (ms)"},
    "after_timestamp": {"type": "integer", "description": "Only trades after this Unix timestamp (ms)"},
    "before_block_height": {"type": "integer", "description": "Only trades before this block height"},
    "after_block_height": {"type": "integer", "description": "Only trades after this block height"},
    "cursor": PAGE_CURSOR,
}

_RECORD_PAGING = {
    "cursor": PAGE_CURSOR,
    "limit": _limit_schema(MAX_PAGE),
    "direction": _enum("Sort direction (default desc)", RECORD_DIRECTIONS),
}


TOOL_REGISTRY: Dict[str, ToolDefinition] = {
    "get_blockchain_list": ToolDefinition(
        name="get_blockchain_list",
        description="List blockchains supported by the DEX API.",
        params={},
        input_schema=_object({}, []),
        annotations=_read_only("Blockchain List Tool"),
        callable=get_blockchain_list,
    ),
    "get_latest_block": ToolDefinition(
        name="get_latest_block",
        description="Return the latest block hash and height for a chain.",
        params={"chain": "string (required)"},
        input_schema=_object({"chain": _chain_schema()}, ["chain"]),
        annotations=_read_only("Latest Block Tool"),
        callable=get_latest_block,
    ),
    "get_dex_list": ToolDefinition(
        name="get_dex_list",
        description="List DEX protocols on one or more chains.",
        params={
            "chains": "array of strings (required)",
            "limit": "integer (optional, 1-100)",
            "dex_program": "string (optional)",
        },
        input_schema=_object(
            {
                "chains": {"type": "array", "items": _chain_schema(), "minItems": 1},
                "limit": _limit_schema(MAX_PAGE),
                "dex_program": _string("Filter by DEX program address"),
            },
            ["chains"],
        ),
        annotations=_read_only("DEX List Tool"),
        callable=get_dex_list,
    ),
    "get_dexpool_detail": ToolDefinition(
        name="get_dexpool_detail",
        description="Return details for a DEX pool: token pair, protocol, reserves, TVL.",
        params={"chain": "string (required)", "pool_address": "string (required)"},
        input_schema=_object(
            {"chain": _chain_schema(), "pool_address": _string("DEX pool address", minLength=1)},
            ["chain", "pool_address"],
        ),
        annotations=_read_only("DEX Pool Detail Tool"),
        callable=get_dexpool_detail,
    ),
    "get_token": ToolDefinition(
        name="get_token",
        description="Return token information by chain and address.",
        params={"chain": "string (required)", "token_address": "string (required)"},
        input_schema=_object({"chain": _chain_schema(), "token_address": TOKEN_ADDRESS}, ["chain", "token_address"]),
        annotations=_read_only("Token Information Tool"),
        callable=get_token,
    ),
    "search_tokens": ToolDefinition(
        name="search_tokens",
        description="Search tokens on a chain by name, symbol, or address.",
        params={
            "chain": "string (required)",
            "query": "string (required)",
            "limit": "integer (optional, 1-100)",
            "sort": "string (optional, asc|desc)",
            "sort_by": "string (optional)",
            "protocols": "array of strings (optional)",
            "cursor": "string (optional)",
        },
        input_schema=_object(
            {
                "chain": _chain_schema(),
                "query": _string("Search keyword", minLength=1),
                "limit": _limit_schema(MAX_PAGE),
                "sort": _enum("Sort order", SORT_ORDERS),
                "sort_by": _enum("Sort field", TOKEN_SORT_FIELDS),
                "protocols": {"type": "array", "items": {"type": "string"}, "description": "Launch protocols"},
                "cursor": PAGE_CURSOR,
            },
            ["chain", "query"],
        ),
        annotations=_read_only("Token Search Tool"),
        callable=search_tokens,
    ),
    "get_token_metadata": ToolDefinition(
        name="get_token_metadata",
        description="Return token metadata: name, symbol, decimals, logo, links.",
        params={"chain": "string (required)", "token_address": "string (required)"},
        input_schema=_object({"chain": _chain_schema(), "token_address": TOKEN_ADDRESS}, ["chain", "token_address"]),
        annotations=_read_only("Token Metadata Tool"),
        callable=get_token_metadata,
    ),
    "get_token_pools": ToolDefinition(
        name="get_token_pools",
        description="List liquidity pools that contain a token.",
        params={"chain": "string (required)", "token_address": "string (required)"},
        input_schema=_object({"chain": _chain_schema(), "token_address": TOKEN_ADDRESS}, ["chain", "token_address"]),
        annotations=_read_only("Token Liquidity Pools Tool"),
        callable=get_token_pools,
    ),
    "get_token_stats": ToolDefinition(
        name="get_token_stats",
        description="Return token trading statistics across timeframes.",
        params={"chain": "string (required)", "token_address": "string (required)"},
        input_schema=_object({"chain": _chain_schema(), "token_address": TOKEN_ADDRESS}, ["chain", "token_address"]),
        annotations=_read_only("Token Statistics Tool"),
        callable=get_token_stats,
    ),
    "get_token_holders": ToolDefinition(
        name="get_token_holders",
        description="Page through the holders of a token.",
        params={
            "chain": "string (required)",
            "token_address": "string (required)",
            "cursor": "string (optional)",
            "limit": "integer (optional, 1-100)",
            "direction": "string (optional, next|prev)",
        },
        input_schema=_object(
            {
                "chain": _chain_schema(),
                "token_address": TOKEN_ADDRESS,
                "cursor": PAGE_CURSOR,
                "limit": _limit_schema(MAX_PAGE),
                "direction": _enum("Page direction", PAGE_DIRECTIONS),
            },
            ["chain", "token_address"],
        ),
        annotations=_read_only("Token Holders Tool"),
        callable=get_token_holders,
    ),
    "get_token_candles": ToolDefinition(
        name="get_token_candles",
        description="Return OHLCV price candles for a token.",
        params={
            "chain": "string (required)",
            "token_address": "string (required)",
            "resolution": "string (required)",
            "from_time": "integer (optional, Unix ms)",
            "to_time": "integer (optional, Unix ms)",
            "limit": "integer (optional, 1-100)",
        },
        input_schema=_object(
            {
                "chain": _chain_schema(),
                "token_address": TOKEN_ADDRESS,
                "resolution": _enum("Candle resolution", CANDLE_RESOLUTIONS),
                "from_time": {"type": "integer", "description": "Start timestamp (Unix ms)"},
                "to_time": {"type": "integer", "description": "End timestamp (Unix ms)"},
                "limit": _limit_schema(MAX_PAGE),
            },
            ["chain", "token_address", "resolution"],
        ),
        annotations=_read_only("Token Candles Tool"),
        callable=get_token_candles,
    ),
    "get_hot_tokens": ToolDefinition(
        name="get_hot_tokens",
        description="Return the hot token ranking for a chain and duration (max 10 results).",
        params={
            "chain": "string (required)",
            "duration": "string (required)",
            "sort_by": "string (optional)",
            "sort_direction": "string (optional, ASC|DESC)",
            "filter_by": "object (optional)",
        },
        input_schema=_object(
            {
                "chain": _chain_schema(),
                "duration": _enum("Ranking window", DURATIONS),
                "sort_by": _enum("Sort field", HOT_TOKEN_SORT_FIELDS),
                "sort_direction": _enum("Sort direction", SORT_DIRECTIONS),
                "filter_by": {"description": "Filter criteria (object, array, or JSON string)"},
            },
            ["chain", "duration"],
        ),
        annotations=_read_only("Hot Tokens Ranking Tool"),
        callable=get_hot_tokens,
    ),
    "get_new_tokens": ToolDefinition(
        name="get_new_tokens",
        description="Return newly launched tokens on a chain.",
        params={"chain": "string (required)"},
        input_schema=_object({"chain": _chain_schema()}, ["chain"]),
        annotations=_read_only("New Tokens Ranking Tool"),
        callable=get_new_tokens,
    ),
    "get_stocks_tokens": ToolDefinition(
        name="get_stocks_tokens",
        description="Return tokens that track stock assets on a chain.",
        params={"chain": "string (required)"},
        input_schema=_object({"chain": _chain_schema()}, ["chain"]),
        annotations=_read_only("Stock Tokens Ranking Tool"),
        callable=get_stocks_tokens,
    ),
    "get_final_stretch_tokens": ToolDefinition(
        name="get_final_stretch_tokens",
        description="Return launchpad tokens in their final stretch on a chain.",
        params={"chain": "string (required)"},
        input_schema=_object({"chain": _chain_schema()}, ["chain"]),
        annotations=_read_only("Final Stretch Ranking Tool"),
        callable=get_final_stretch_tokens,
    ),
    "get_migrated_tokens": ToolDefinition(
        name="get_migrated_tokens",
        description="Return tokens that migrated from a launchpad to a DEX.",
        params={"chain": "string (required)"},
        input_schema=_object({"chain": _chain_schema()}, ["chain"]),
        annotations=_read_only("Migrated Tokens Ranking Tool"),
        callable=get_migrated_tokens,
    ),
    "get_trade_list": ToolDefinition(
        name="get_trade_list",
        description="List trades on a chain with filters and pagination.",
        params={
            "chain": "string (required)",
            "token_address": "string (optional)",
            "wallet_address": "string (optional)",
            "pool_address": "string (optional)",
            "type": "string (optional, BUY|SELL)",
            "limit": "integer (optional, 1-100)",
            "direction": "string (optional, next|prev)",
        },
        input_schema=_object(
            {
                "chain": _chain_schema(),
                **_TRADE_FILTERS,
                "type": _enum("Trade side", TRADE_SIDES),
                "limit": _limit_schema(MAX_PAGE),
                "direction": _enum("Page direction", PAGE_DIRECTIONS),
            },
            ["chain"],
        ),
        annotations=_read_only("Trade List Tool"),
        callable=get_trade_list,
    ),
    "get_top_traders": ToolDefinition(
        name="get_top_traders",
        description="Return the top traders of a token (default 30m window by volume).",
        params={
            "chain": "string (required)",
            "token_address": "string (required)",
            "time_frame": "string (optional, default 30m)",
            "sort_type": "string (optional, default desc)",
            "sort_by": "string (optional, default volume)",
            "limit": "integer (optional, 1-10)",
        },
        input_schema=_object(
            {
                "chain": _chain_schema(),
                "token_address": TOKEN_ADDRESS,
                "time_frame": _string("Time frame, e.g. 30m, 1h, 24h"),
                "sort_type": _enum("Sort order", SORT_ORDERS),
                "sort_by": _string("Sort field, e.g. volume"),
                "cursor": PAGE_CURSOR,
                "limit": _limit_schema(MAX_TOP),
                "direction": _enum("Page direction", PAGE_DIRECTIONS),
            },
            ["chain", "token_address"],
        ),
        annotations=_read_only("Top Traders Tool"),
        callable=get_top_traders,
    ),
    "get_gainers_losers": ToolDefinition(
        name="get_gainers_losers",
        description="Return top gaining and losing wallets on a chain (default 1W by PnL).",
        params={
            "chain": "string (required)",
            "type": "string (optional, default 1W)",
            "sort_by": "string (optional, default PnL)",
            "sort_type": "string (optional, default desc)",
            "limit": "integer (optional, 1-10)",
        },
        input_schema=_object(
            {
                "chain": _chain_schema(),
                "type": _string("Period, e.g. 1W"),
                "sort_by": _string("Sort field, e.g. PnL"),
                "sort_type": _enum("Sort order", SORT_ORDERS),
                "cursor": PAGE_CURSOR,
                "limit": _limit_schema(MAX_TOP),
                "direction": _enum("Page direction", PAGE_DIRECTIONS),
            },
            ["chain"],
        ),
        annotations=_read_only("Gainers/Losers Tool"),
        callable=get_gainers_losers,
    ),
    "get_trade_activities": ToolDefinition(
        name="get_trade_activities",
        description="List token activities: trades, liquidity, and red packet events.",
        params={
            "chain": "string (required)",
            "token_address": "string (optional)",
            "wallet_address": "string (optional)",
            "pool_address": "string (optional)",
            "limit": "integer (optional, 1-100, default 20)",
        },
        input_schema=_object(
            {
                "chain": _chain_schema(),
                **_TRADE_FILTERS,
                "type": _string("Activity type filter"),
                "limit": _limit_schema(MAX_PAGE),
                "direction": _enum("Page direction", PAGE_DIRECTIONS),
            },
            ["chain"],
        ),
        annotations=_read_only("Trade Activity Tool"),
        callable=get_trade_activities,
    ),
    "send_transaction": ToolDefinition(
        name="send_transaction",
        description="Broadcast a signed transaction to a chain.",
        params={"chain": "string (required)", "signed_tx": "string (required)"},
        input_schema=_object(
            {"chain": _chain_schema(), "signed_tx": _string("Signed transaction payload", minLength=1)},
            ["chain", "signed_tx"],
        ),
        annotations=_write("Transaction Send Tool", destructive=True),
        callable=send_transaction,
    ),
    "get_wallet_balance": ToolDefinition(
        name="get_wallet_balance",
        description="Return native and token balances of a wallet.",
        params={"chain": "string (required)", "wallet_address": "string (required)"},
        input_schema=_object(
            {"chain": _chain_schema(), "wallet_address": _string("Wallet address", minLength=1)},
            ["chain", "wallet_address"],
        ),
        annotations=_read_only("Wallet Balance Tool"),
        callable=get_wallet_balance,
    ),
    "create_redpacket": ToolDefinition(
        name="create_redpacket",
        description="Build an unsigned red packet creation transaction.",
        params={
            "chain": "string (required)",
            "creator": "string (required)",
            "mint": "string (required)",
            "max_claims": "integer (required, >= 1)",
            "total_amount": "string (optional)",
            "fixed_amount": "string (optional)",
            "memo": "string (optional)",
            "password": "string (optional)",
            "claim_authority": "string (optional)",
        },
        input_schema=_object(
            {
                "chain": _chain_schema(),
                "creator": _string("Creator wallet address"),
                "mint": _string("Token mint address"),
                "max_claims": {"type": "integer", "minimum": 1, "description": "Maximum number of claims"},
                "total_amount": _string("Total amount to distribute"),
                "fixed_amount": _string("Fixed amount per claim"),
                "memo": _string("Memo"),
                "password": _string("Claim password"),
                "claim_authority": _string("Claim authority address"),
            },
            ["chain", "creator", "mint", "max_claims"],
        ),
        annotations=_write("Red Packet Create Tool"),
        callable=create_redpacket,
    ),
    "claim_redpacket": ToolDefinition(
        name="claim_redpacket",
        description="Build an unsigned red packet claim transaction.",
        params={
            "chain": "string (required)",
            "claimer": "string (required)",
            "packet_id": "string (optional)",
            "share_id": "string (optional)",
            "password": "string (optional)",
        },
        input_schema=_object(
            {
                "chain": _chain_schema(),
                "claimer": _string("Claimer wallet address"),
                "packet_id": _string("Red packet id"),
                "share_id": _string("Red packet share id"),
                "password": _string("Claim password"),
            },
            ["chain", "claimer"],
        ),
        annotations=_write("Red Packet Claim Tool"),
        callable=claim_redpacket,
    ),
    "get_redpacket": ToolDefinition(
        name="get_redpacket",
        description="Return a red packet by id.",
        params={"id": "string (required)"},
        input_schema=_object({"id": _string("Red packet id", minLength=1)}, ["id"]),
        annotations=_read_only("Red Packet Query Tool"),
        callable=get_redpacket,
    ),
    "get_redpacket_claims": ToolDefinition(
        name="get_redpacket_claims",
        description="Page through the claim records of a red packet.",
        params={"id": "string (required)", "cursor": "string (optional)", "limit": "integer (optional)", "direction": "string (optional)"},
        input_schema=_object({"id": _string("Red packet id", minLength=1), **_RECORD_PAGING}, ["id"]),
        annotations=_read_only("Red Packet Claims Tool"),
        callable=get_redpacket_claims,
    ),
    "list_redpackets": ToolDefinition(
        name="list_redpackets",
        description="List red packets, optionally filtered by creator or chain.",
        params={
            "cursor": "string (optional)",
            "limit": "integer (optional)",
            "direction": "string (optional)",
            "creator": "string (optional)",
            "chain": "string (optional)",
        },
        input_schema=_object(
            {**_RECORD_PAGING, "creator": _string("Creator wallet address"), "chain": _chain_schema()},
            [],
        ),
        annotations=_read_only("Red Packet List Tool"),
        callable=list_redpackets,
    ),
    "get_redpacket_claims_by_address": ToolDefinition(
        name="get_redpacket_claims_by_address",
        description="Page through red packet claims made by a wallet.",
        params={"address": "string (required)", "cursor": "string (optional)", "limit": "integer (optional)", "direction": "string (optional)"},
        input_schema=_object({"address": _string("Claimer wallet address", minLength=1), **_RECORD_PAGING}, ["address"]),
        annotations=_read_only("Red Packet Claims By Address Tool"),
        callable=get_redpacket_claims_by_address,
    ),
    "get_redpackets_by_address": ToolDefinition(
        name="get_redpackets_by_address",
        description="Page through red packets created by a wallet.",
        params={"address": "string (required)", "cursor": "string (optional)", "limit": "integer (optional)", "direction": "string (optional)"},
        input_schema=_object({"address": _string("Creator wallet address", minLength=1), **_RECORD_PAGING}, ["address"]),
        annotations=_read_only("Red Packets By Address Tool"),
        callable=get_redpackets_by_address,
    ),
    "send_redpacket": ToolDefinition(
        name="send_redpacket",
        description="Broadcast a signed red packet transaction.",
        params={"chain": "string (required)", "signed_tx": "string (required)"},
        input_schema=_object(
            {"chain": _chain_schema(), "signed_tx": _string("Signed transaction payload", minLength=1)},
            ["chain", "signed_tx"],
        ),
        annotations=_write("Red Packet Send Tool", destructive=True),
        callable=send_redpacket,
    ),
    "detect_address_type": ToolDefinition(
        name="detect_address_type",
        description="Classify an address as evm, solana, or invalid without calling the API.",
        params={"address": "string (required)"},
        input_schema=_object({"address": _string("Wallet, token, or pool address")}, ["address"]),
        annotations=_read_only("Address Type Tool"),
        callable=detect_address_type,
        requires_auth=False,
    ),
}


def list_tools() -> List[Dict[str, Any]]:
    """Return a simple list of available tools."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "params": tool.params,
            "inputSchema": tool.input_schema,
            "annotations": tool.annotations,
        }
        for tool in TOOL_REGISTRY.values()
    ]


async def call_tool(
    tool_name: str,
    params: Optional[Dict[str, Any]] = None,
    access_token: Optional[str] = None,
) -> Any:
    """Dispatch to a tool by name."""
    params = dict(params or {})
    tool = TOOL_REGISTRY.get(tool_name)
    if tool is None:
        return error_envelope(f"Unknown tool: {tool_name}", LookupError(f"No tool named {tool_name}"))

    # Callers cannot smuggle a token, client, or config in through the arguments.
    for reserved in ("access_token", "client", "config", "extra_echo", "max_results"):
        params.pop(reserved, None)
    if tool.requires_auth:
        params["access_token"] = access_token

    try:
        result = tool.callable(**params)
        if isinstance(result, Awaitable):
            return await result  # type: ignore[return-value]
        return result
    except TypeError as exc:
        return error_envelope("Invalid parameters.", exc)
    except Exception as exc:
        logger.exception("Unexpected error calling tool %s", tool_name)
        return error_envelope("Unexpected error while calling tool.", exc)


# Resources

ResourceHandler = Callable[..., Awaitable[Dict[str, Any]]]
_TEMPLATE_VAR = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _compile_template(uri_template: str) -> Pattern[str]:
    path = uri_template.split("?", 1)[0]
    pattern = ""
    last = 0
    for match in _TEMPLATE_VAR.finditer(path):
        pattern += re.escape(path[last : match.start()])
        pattern += f"(?P<{match.group(1)}>[^/?#]+)"
        last = match.end()
    pattern += re.escape(path[last:])
    return re.compile(pattern)


@dataclass(slots=True)
class ResourceTemplateDefinition:
    name: str
    uri_template: str
    description: str
    handler: ResourceHandler
    mime_type: str = "application/json"
    pattern: Pattern[str] = field(init=False)

    def __post_init__(self) -> None:
        self.pattern = _compile_template(self.uri_template)

    @property
    def is_static(self) -> bool:
        return _TEMPLATE_VAR.search(self.uri_template) is None

    def match(self, uri: str) -> Optional[Dict[str, str]]:
        path = uri.split("?", 1)[0]
        matched = self.pattern.fullmatch(path)
        if matched is None:
            return None
        return {key: unquote(value) for key, value in matched.groupdict().items()}


# Ordered so literal segments win over variables (token/search before token/{chain}).
RESOURCE_REGISTRY: Dict[str, ResourceTemplateDefinition] = {
    definition.name: definition
    for definition in (
        ResourceTemplateDefinition(
            name="blockchain_list",
            uri_template="mcp://dex/blockchain/list",
            description="Supported blockchains.",
            handler=resources.read_blockchain_list,
        ),
        ResourceTemplateDefinition(
            name="blockchain_latest_block",
            uri_template="mcp://dex/blockchain/latest_block/{chain}",
            description="Latest block of a chain.",
            handler=resources.read_latest_block,
        ),
        ResourceTemplateDefinition(
            name="dex_list",
            uri_template="mcp://dex/list?chains={chains}&limit={limit}&dexProgram={dexProgram}",
            description="DEX protocols on the given chains.",
            handler=resources.read_dex_list,
        ),
        ResourceTemplateDefinition(
            name="dexpool_detail",
            uri_template="mcp://dex/dexpool/detail/{chain}/{poolAddress}",
            description="Details of a DEX pool.",
            handler=resources.read_dexpool_detail,
        ),
        ResourceTemplateDefinition(
            name="token_search",
            uri_template="mcp://dex/token/search/{chain}/{query}",
            description="Token search (first 10 results). Optional limit, sort, sortBy, protocols, cursor.",
            handler=resources.read_token_search,
        ),
        ResourceTemplateDefinition(
            name="token",
            uri_template="mcp://dex/token/{chain}/{tokenAddress}",
            description="Token information.",
            handler=resources.read_token,
        ),
        ResourceTemplateDefinition(
            name="hot_tokens",
            uri_template="mcp://dex/ranking/hot-tokens/{chain}/{duration}",
            description="Hot token ranking (first 10). Optional sortBy, sortDirection, filterBy (JSON).",
            handler=resources.read_hot_tokens,
        ),
        ResourceTemplateDefinition(
            name="trade_list",
            uri_template=(
                "mcp://dex/trade/list/{chain}?tokenAddress={tokenAddress}&walletAddress={walletAddress}"
                "&poolAddress={poolAddress}&type={type}&beforeTimestamp={beforeTimestamp}"
                "&afterTimestamp={afterTimestamp}&beforeBlockHeight={beforeBlockHeight}"
                "&afterBlockHeight={afterBlockHeight}&cursor={cursor}&limit={limit}&direction={direction}"
            ),
            description="Trades on a chain with filters.",
            handler=resources.read_trade_list,
        ),
        ResourceTemplateDefinition(
            name="trade_top_traders",
            uri_template=(
                "mcp://dex/trade/topTraders/{chain}?tokenAddress={tokenAddress}&timeFrame={timeFrame}"
                "&sortType={sortType}&sortBy={sortBy}&cursor={cursor}&limit={limit}&direction={direction}"
            ),
            description="Top traders of a token.",
            handler=resources.read_top_traders,
        ),
        ResourceTemplateDefinition(
            name="trade_gainers_losers",
            uri_template=(
                "mcp://dex/trade/gainers-losers/{chain}?type={type}&sortBy={sortBy}&sortType={sortType}"
                "&cursor={cursor}&limit={limit}&direction={direction}"
            ),
            description="Top gaining and losing wallets.",
            handler=resources.read_gainers_losers,
        ),
        ResourceTemplateDefinition(
            name="send_transaction",
            uri_template="mcp://transaction/send/{chain}/{to}?signedTx={signedTx}",
            description="Broadcast a signed transaction.",
            handler=resources.read_send_transaction,
        ),
        ResourceTemplateDefinition(
            name="wallet_balance",
            uri_template="mcp://dex/wallet/{chain}/{walletAddress}",
            description="Wallet balances.",
            handler=resources.read_wallet_balance,
        ),
    )
}


def list_resource_templates() -> List[Dict[str, Any]]:
    return [
        {
            "name": resource.name,
            "uriTemplate": resource.uri_template,
            "description": resource.description,
            "mimeType": resource.mime_type,
        }
        for resource in RESOURCE_REGISTRY.values()
    ]


def list_resources() -> List[Dict[str, Any]]:
    """Static resources: templates without any variables."""
    return [
        {
            "name": resource.name,
            "uri": resource.uri_template,
            "description": resource.description,
            "mimeType": resource.mime_type,
        }
        for resource in RESOURCE_REGISTRY.values()
        if resource.is_static
    ]


def match_resource(uri: str) -> Optional[tuple[ResourceTemplateDefinition, Dict[str, str]]]:
    for resource in RESOURCE_REGISTRY.values():
        variables = resource.match(uri)
        if variables is not None:
            return resource, variables
    return None


async def read_resource(
    uri: str,
    access_token: Optional[str] = None,
    *,
    client: Any = None,
) -> Optional[Dict[str, Any]]:
    """
    Resolve ``uri`` against the registered templates and read it.

    Returns None when no template matches.
    """
    matched = match_resource(uri)
    if matched is None:
        return None
    resource, variables = matched
    query = parse_qs(uri.split("?", 1)[1], keep_blank_values=True) if "?" in uri else {}
    kwargs: Dict[str, Any] = {"access_token": access_token}
    if client is not None:
        kwargs["client"] = client
    envelope = await resource.handler(variables, query, **kwargs)
    return {
        "contents": [
            {
                "uri": uri,
                "mimeType": resource.mime_type,
                "text": json.dumps(envelope, indent=2),
            }
        ]
    }


# Prompts

PROMPT_REGISTRY: Dict[str, PromptDefinition] = {prompt.name: prompt for prompt in PROMPTS}


def list_prompts() -> List[Dict[str, Any]]:
    return [describe_prompt(prompt) for prompt in PROMPT_REGISTRY.values()]


def get_prompt(name: str, arguments: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
    """Render a prompt; None for unknown names, PromptArgumentError for bad arguments."""
    prompt = PROMPT_REGISTRY.get(name)
    if prompt is None:
        return None
    return render_prompt(prompt, arguments)
