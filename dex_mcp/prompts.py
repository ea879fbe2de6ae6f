"""
Canned conversation guides that point an assistant at the right tool.

Each prompt renders a user turn and an assistant turn. Arguments are plain
strings; enum-style arguments are checked against their allowed values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from dex_mcp.tools.validators import CANDLE_RESOLUTIONS

CHAIN_HINT = "Chain name (sol, base, bsc, polygon, arbitrum, optimism, avalanche, ethereum, zksync, sui)"


class PromptArgumentError(ValueError):
    """Raised when a prompt argument is missing or outside its allowed values."""


@dataclass(slots=True)
class PromptArgument:
    name: str
    description: str
    required: bool = True
    choices: Optional[Sequence[str]] = None


Renderer = Callable[[Dict[str, str]], Tuple[str, str]]


@dataclass(slots=True)
class PromptDefinition:
    name: str
    description: str
    title: str
    renderer: Renderer
    arguments: List[PromptArgument] = field(default_factory=list)


def _optional(name: str, description: str, choices: Optional[Sequence[str]] = None) -> PromptArgument:
    return PromptArgument(name=name, description=description, required=False, choices=choices)


def _details(args: Mapping[str, str], labels: Sequence[Tuple[str, str]]) -> str:
    lines = [f"- {label}: {args[key]}" for key, label in labels if args.get(key)]
    return "\n".join(lines)


def _guide(intro: str, points: Sequence[str], tool: str, details: str = "") -> str:
    body = "\n".join(f"{index}. {point}" for index, point in enumerate(points, start=1))
    text = f"{intro}\n{body}"
    if details:
        text += f"\n\nParameters:\n{details}"
    return f"{text}\n\nCall the `{tool}` tool to fetch the live data."


PAGING_LABELS = (("cursor", "Cursor"), ("limit", "Limit"), ("direction", "Direction"))

# Blockchain


def _blockchain_list(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        "Which blockchains does the DEX API support?",
        _guide(
            "I can list the supported networks with:",
            ["Chain identifiers to use in other calls", "Display names and native currency", "Chain ids where available"],
            "get_blockchain_list",
        ),
    )


def _latest_block(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"What is the latest block on {args['chain']}?",
        _guide(
            f"I will look up the newest block on {args['chain']}, including:",
            ["Block height", "Block hash", "Block timestamp"],
            "get_latest_block",
        ),
    )


# DEX and pools


def _dex_list(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"List the DEX protocols deployed on {args['chains']}.",
        _guide(
            "I will page through the DEX protocols on those chains, showing:",
            ["Protocol name and family", "Program or router address", "Chain and metadata"],
            "get_dex_list",
            _details(args, (("chains", "Chains"), ("limit", "Limit"), ("dex_program", "DEX program"))),
        ),
    )


def _dexpool_detail(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Show me the details of pool {args['pool_address']} on {args['chain']}.",
        _guide(
            "I will fetch the pool and report:",
            ["Token pair and reserves", "Protocol and fee tier", "TVL and recent activity"],
            "get_dexpool_detail",
        ),
    )


# Tokens

TOKEN_SEARCH_STRATEGIES = {
    "by-name": {
        "short-term": "Look tokens up by name and favour deep liquidity and active trading.",
        "long-term": "Look tokens up by name and weigh project fundamentals over price action.",
        "yield-farming": "Look tokens up by name and compare the pools that pay yield on them.",
        "governance": "Look governance tokens up by name and check holder spread and voting activity.",
    },
    "by-symbol": {
        "short-term": "Search by ticker for heavily traded tokens.",
        "long-term": "Search by ticker for established projects.",
        "yield-farming": "Search by ticker for tokens used in farms.",
        "governance": "Search by ticker for governance tokens.",
    },
    "by-category": {
        "short-term": "Browse the sectors with the most momentum right now.",
        "long-term": "Browse sectors with durable demand.",
        "yield-farming": "Browse DeFi sectors that offer farming rewards.",
        "governance": "Browse DAO and governance sectors.",
    },
    "trending": {
        "short-term": "Start from the hot token ranking and trade the short-term moves.",
        "long-term": "Start from the hot token ranking and keep only tokens with real usage.",
        "yield-farming": "Start from the hot token ranking and look for new farming pools.",
        "governance": "Start from the hot token ranking and pick out governance tokens.",
    },
}


def _token_research(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Research token {args['token_address']} on {args['chain']} for me.",
        _guide(
            "I will build a token profile covering:",
            ["Name, symbol and decimals", "Price, market cap and liquidity", "Holder concentration", "Risk flags"],
            "get_token",
        ),
    )


def _token_search_strategy(args: Dict[str, str]) -> Tuple[str, str]:
    search_type = args["search_type"]
    goal = args["investment_goal"]
    return (
        f"I want to find tokens {search_type} with a {goal} goal.",
        TOKEN_SEARCH_STRATEGIES[search_type][goal]
        + "\n\nUse `search_tokens` (or `get_hot_tokens` for trending) to run the search.",
    )


def _token_metadata(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Get the metadata of token {args['token_address']} on {args['chain']}.",
        _guide(
            "I will retrieve the token metadata:",
            ["Name, symbol and decimals", "Logo and description", "Website and social links"],
            "get_token_metadata",
        ),
    )


def _token_pools(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Which liquidity pools hold token {args['token_address']} on {args['chain']}?",
        _guide(
            "I will list every pool that contains the token with:",
            ["Pool address and DEX", "Paired token", "Liquidity and volume"],
            "get_token_pools",
        ),
    )


def _token_stats(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Show trading statistics for token {args['token_address']} on {args['chain']}.",
        _guide(
            "I will summarize the token statistics across 1m, 5m, 1h, 4h and 24h windows:",
            ["Price change", "Volume in USD", "Trade and trader counts"],
            "get_token_stats",
        ),
    )


def _token_holders(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Who holds token {args['token_address']} on {args['chain']}?",
        _guide(
            "I will page through the holder list showing:",
            ["Wallet address", "Balance and share of supply", "Concentration among top holders"],
            "get_token_holders",
        ),
    )


def _token_candles(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Show {args['resolution']} price candles for token {args['token_address']} on {args['chain']}.",
        _guide(
            "I will fetch OHLCV candles with:",
            ["Open, high, low and close prices", "Volume per candle", "Candle timestamps"],
            "get_token_candles",
            _details(
                args,
                (("resolution", "Resolution"), ("from_time", "From"), ("to_time", "To"), ("limit", "Limit")),
            ),
        ),
    )


# Rankings


def _hot_tokens(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Analyze the hot tokens on {args['chain']} over the last {args['timeframe']}.",
        _guide(
            "I will review the trending tokens and cover:",
            ["Price trend", "Volume changes", "Market sentiment", "Risks worth flagging"],
            "get_hot_tokens",
        ),
    )


def _ranking_guide(label: str, tool: str, points: Sequence[str]) -> Renderer:
    def render(args: Dict[str, str]) -> Tuple[str, str]:
        return (
            f"Show me the {label} on {args['chain']}.",
            _guide(f"I will fetch the {label} with:", points, tool),
        )

    return render


# Trades


def _trade_list(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Show recent trades on {args['chain']}.",
        _guide(
            "I will list trades with:",
            ["Side, amounts and price", "Wallet and pool", "Block and timestamp"],
            "get_trade_list",
            _details(
                args,
                (
                    ("token_address", "Token"),
                    ("wallet_address", "Wallet"),
                    ("pool_address", "Pool"),
                    ("type", "Side"),
                )
                + PAGING_LABELS,
            ),
        ),
    )


def _top_traders(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Who are the top traders of token {args['token_address']} on {args['chain']}?",
        _guide(
            "I will rank the traders (defaults: 30m window, by volume, descending) and show:",
            ["Wallet address", "Volume and PnL", "Buy and sell counts"],
            "get_top_traders",
            _details(
                args,
                (("time_frame", "Time frame"), ("sort_by", "Sort by"), ("sort_type", "Order"), ("limit", "Limit")),
            ),
        ),
    )


def _gainers_losers(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Show the biggest gainers and losers on {args['chain']}.",
        _guide(
            "I will rank wallets by performance (defaults: 1W, by PnL, descending) with:",
            ["Realized and unrealized PnL", "Win rate", "Traded volume"],
            "get_gainers_losers",
            _details(args, (("type", "Period"), ("sort_by", "Sort by"), ("sort_type", "Order"), ("limit", "Limit"))),
        ),
    )


def _trade_activities(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Show token activity on {args['chain']}.",
        _guide(
            "I will list activities including:",
            ["Trades", "Liquidity adds and removals", "Red packet events"],
            "get_trade_activities",
            _details(
                args,
                (("token_address", "Token"), ("wallet_address", "Wallet"), ("pool_address", "Pool"))
                + PAGING_LABELS,
            ),
        ),
    )


# Transactions and wallets


def _send_transaction(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"I want to send {args['value']} to {args['to']} on {args['chain']}.",
        "Steps to send the transaction safely:\n"
        "1. Double-check the recipient address and the chain.\n"
        "2. Make sure the wallet holds enough for the amount plus fees.\n"
        "3. Build and sign the transaction in your own wallet; never share private keys.\n"
        "4. Broadcast the signed payload.\n\n"
        "Call the `send_transaction` tool with the chain and the signed transaction.",
    )


def _wallet_balance(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"What is the balance of wallet {args['wallet_address']} on {args['chain']}?",
        _guide(
            "I will check the wallet and report:",
            ["Native token balance", "Token balances", "USD valuation where available"],
            "get_wallet_balance",
        ),
    )


WALLET_STRATEGIES = {
    "balance-monitoring": {
        "current": "Check the balance now to support an immediate decision.",
        "daily": "Compare daily balances to spot recurring patterns.",
        "weekly": "Follow weekly balance trends for medium-term planning.",
        "monthly": "Review how the balance moves month to month.",
    },
    "portfolio-tracking": {
        "current": "Break down the current holdings and allocation.",
        "daily": "Track daily value changes and rebalancing needs.",
        "weekly": "Measure weekly performance and risk.",
        "monthly": "Judge monthly growth against the plan.",
    },
    "transaction-history": {
        "current": "Verify the most recent transactions.",
        "daily": "Look at daily transaction counts and volume.",
        "weekly": "Follow weekly activity and frequency.",
        "monthly": "Look for monthly habits that can be optimized.",
    },
    "risk-assessment": {
        "current": "Assess current exposure and wallet security.",
        "daily": "Watch daily risk indicators and alerts.",
        "weekly": "Review weekly risk trends and mitigations.",
        "monthly": "Revisit the monthly risk profile and security plan.",
    },
}


def _wallet_strategy(args: Dict[str, str]) -> Tuple[str, str]:
    analysis = args["analysis_type"]
    time_frame = args["time_frame"]
    return (
        f"I want to analyze my wallet with {analysis} over a {time_frame} time frame.",
        WALLET_STRATEGIES[analysis][time_frame],
    )


# Red packets


def _redpacket_create(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Create a red packet on {args['chain']} from {args['creator']}.",
        _guide(
            "Creating a red packet takes three steps:",
            [
                "Build the unsigned transaction",
                "Sign the returned txSerialize with the creator wallet",
                "Broadcast it with `send_redpacket` and share the shareId",
            ],
            "create_redpacket",
            _details(
                args,
                (
                    ("mint", "Token mint"),
                    ("max_claims", "Max claims"),
                    ("total_amount", "Total amount"),
                    ("fixed_amount", "Fixed amount"),
                    ("memo", "Memo"),
                    ("claim_authority", "Claim authority"),
                ),
            ),
        ),
    )


def _redpacket_claim(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Claim a red packet on {args['chain']} for {args['claimer']}.",
        _guide(
            "Claiming works like this:",
            [
                "Build the claim with the packet id or share id",
                "Sign the returned txSerialize with the claimer wallet",
                "Broadcast it with `send_redpacket`",
            ],
            "claim_redpacket",
            _details(args, (("packet_id", "Packet id"), ("share_id", "Share id"))),
        ),
    )


def _redpacket_get(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Show red packet {args['id']}.",
        _guide(
            "I will fetch the red packet with:",
            ["Creator and token mint", "Amounts and claim count", "Status and expiry"],
            "get_redpacket",
        ),
    )


def _redpacket_records(subject: str, tool: str, target_key: Optional[str]) -> Renderer:
    def render(args: Dict[str, str]) -> Tuple[str, str]:
        target = f" for {args[target_key]}" if target_key else ""
        labels = PAGING_LABELS
        if target_key is None:
            labels = labels + (("creator", "Creator"), ("chain", "Chain"))
        return (
            f"Show {subject}{target}.",
            _guide(
                f"I will page through {subject} (newest first by default) with:",
                ["Record details", "Amounts and timestamps", "Cursors for the next page"],
                tool,
                _details(args, labels),
            ),
        )

    return render


def _redpacket_send(args: Dict[str, str]) -> Tuple[str, str]:
    return (
        f"Broadcast my signed red packet transaction on {args['chain']}.",
        "I will submit the signed transaction and return its signature. "
        "Only send payloads you signed yourself.\n\n"
        "Call the `send_redpacket` tool with the chain and signed transaction.",
    )


def _chain_arg() -> PromptArgument:
    return PromptArgument("chain", CHAIN_HINT)


def _token_args() -> List[PromptArgument]:
    return [PromptArgument("token_address", "Token contract address"), _chain_arg()]


def _paging_args() -> List[PromptArgument]:
    return [
        _optional("cursor", "Pagination cursor"),
        _optional("limit", "Records per page (1-100)"),
        _optional("direction", "Sort direction", ("asc", "desc")),
    ]


PROMPTS: List[PromptDefinition] = [
    PromptDefinition("blockchain-list-guide", "Guide to list supported blockchains.", "Blockchain list query guide", _blockchain_list),
    PromptDefinition(
        "blockchain-latest-block-guide",
        "Guide to fetch the latest block of a blockchain.",
        "Latest block query guide",
        _latest_block,
        [_chain_arg()],
    ),
    PromptDefinition(
        "dex-list-guide",
        "List DEX protocols on one or more chains.",
        "DEX list query guide",
        _dex_list,
        [
            PromptArgument("chains", "Comma separated chain names, e.g. sol,eth,bsc"),
            _optional("limit", "Results per page"),
            _optional("dex_program", "DEX program address filter"),
        ],
    ),
    PromptDefinition(
        "dexpool-detail-guide",
        "Inspect a single DEX pool: pair, protocol, TVL.",
        "DEX pool detail query guide",
        _dexpool_detail,
        [_chain_arg(), PromptArgument("pool_address", "DEX pool address")],
    ),
    PromptDefinition("token-research-guide", "Token research and analysis guide.", "Token research guide", _token_research, _token_args()),
    PromptDefinition(
        "token-search-strategy",
        "Pick a token search approach for an investment goal.",
        "Token search strategy guide",
        _token_search_strategy,
        [
            PromptArgument("search_type", "Search approach", choices=tuple(TOKEN_SEARCH_STRATEGIES)),
            PromptArgument("investment_goal", "Investment goal", choices=("short-term", "long-term", "yield-farming", "governance")),
        ],
    ),
    PromptDefinition("token-metadata-guide", "Guide to fetch token metadata.", "Token metadata guide", _token_metadata, _token_args()),
    PromptDefinition(
        "token-liquidity-pools",
        "List the liquidity pools that contain a token.",
        "Token liquidity pool guide",
        _token_pools,
        _token_args(),
    ),
    PromptDefinition("token-stats-guide", "Guide to token statistics across timeframes.", "Token statistics guide", _token_stats, _token_args()),
    PromptDefinition("token-holders-guide", "Guide to fetch the holders of a token.", "Token holders guide", _token_holders, _token_args()),
    PromptDefinition(
        "token-candles-guide",
        "Guide to fetch token OHLCV candles.",
        "Token price candles guide",
        _token_candles,
        _token_args()
        + [
            PromptArgument("resolution", "Candle resolution", choices=CANDLE_RESOLUTIONS),
            _optional("from_time", "Start timestamp (Unix ms)"),
            _optional("to_time", "End timestamp (Unix ms)"),
            _optional("limit", "Number of candles"),
        ],
    ),
    PromptDefinition(
        "hot-tokens-analysis",
        "Analyze trending tokens on a chain within a timeframe.",
        "Hot tokens trend analysis guide",
        _hot_tokens,
        [_chain_arg(), PromptArgument("timeframe", "Time range, e.g. 1h or 24h")],
    ),
    PromptDefinition(
        "ranking-new-tokens-guide",
        "Fetch newly launched tokens on a chain.",
        "New token ranking guide",
        _ranking_guide("newly launched tokens", "get_new_tokens", ["Launch time", "Metadata and socials", "Early market data"]),
        [_chain_arg()],
    ),
    PromptDefinition(
        "ranking-stocks-tokens-guide",
        "Fetch tokens that track stock assets on a chain.",
        "Stock token ranking guide",
        _ranking_guide("stock-backed tokens", "get_stocks_tokens", ["Underlying asset", "Price and market cap", "Liquidity"]),
        [_chain_arg()],
    ),
    PromptDefinition(
        "ranking-finalstretch-tokens-guide",
        "Fetch launchpad tokens in their final stretch on a chain.",
        "Final stretch token ranking guide",
        _ranking_guide(
            "final stretch tokens", "get_final_stretch_tokens", ["Bonding curve progress", "Holder counts", "Launch protocol"]
        ),
        [_chain_arg()],
    ),
    PromptDefinition(
        "ranking-migrated-tokens-guide",
        "Fetch tokens that migrated from a launchpad to a DEX.",
        "Migrated token ranking guide",
        _ranking_guide("migrated tokens", "get_migrated_tokens", ["Migration time", "Destination pool", "Post-migration stats"]),
        [_chain_arg()],
    ),
    PromptDefinition(
        "trade-list-guide",
        "List trades on a chain with filters and pagination.",
        "Trade list query guide",
        _trade_list,
        [
            _chain_arg(),
            _optional("token_address", "Token address filter"),
            _optional("wallet_address", "Wallet address filter"),
            _optional("pool_address", "Pool address filter"),
            _optional("type", "Trade side", ("BUY", "SELL")),
            _optional("cursor", "Pagination cursor"),
            _optional("limit", "Results per page (1-100)"),
            _optional("direction", "Page direction", ("next", "prev")),
        ],
    ),
    PromptDefinition(
        "trade-top-traders-guide",
        "Find the top traders of a token.",
        "Top trader query guide",
        _top_traders,
        [
            _chain_arg(),
            PromptArgument("token_address", "Token address"),
            _optional("time_frame", "Time frame, e.g. 30m or 24h"),
            _optional("sort_type", "Sort order", ("asc", "desc")),
            _optional("sort_by", "Sort field, e.g. volume"),
            _optional("limit", "Max results (1-10)"),
        ],
    ),
    PromptDefinition(
        "trade-gainers-losers-guide",
        "Rank the best and worst performing wallets on a chain.",
        "Gainers/losers query guide",
        _gainers_losers,
        [
            _chain_arg(),
            _optional("type", "Period, e.g. 1W"),
            _optional("sort_by", "Sort field, e.g. PnL"),
            _optional("sort_type", "Sort order", ("asc", "desc")),
            _optional("limit", "Max results (1-10)"),
        ],
    ),
    PromptDefinition(
        "trade-activity-list-guide",
        "List token activities: trades, liquidity and red packet events.",
        "Trade activity query guide",
        _trade_activities,
        [
            _chain_arg(),
            _optional("token_address", "Token address filter"),
            _optional("wallet_address", "Wallet address filter"),
            _optional("pool_address", "Pool address filter"),
            _optional("cursor", "Pagination cursor"),
            _optional("limit", "Results per page (1-100)"),
            _optional("direction", "Page direction", ("next", "prev")),
        ],
    ),
    PromptDefinition(
        "send-transaction-guide",
        "Step-by-step guide to sending a transaction safely.",
        "Transaction sending guide",
        _send_transaction,
        [
            _chain_arg(),
            PromptArgument("to", "Recipient address"),
            PromptArgument("value", "Amount in the smallest unit"),
        ],
    ),
    PromptDefinition(
        "wallet-balance-guide",
        "Check native and token balances of a wallet.",
        "Wallet balance query guide",
        _wallet_balance,
        [PromptArgument("wallet_address", "Wallet address"), _chain_arg()],
    ),
    PromptDefinition(
        "wallet-analysis-strategy",
        "Pick a wallet analysis approach for a time frame.",
        "Wallet analysis strategy guide",
        _wallet_strategy,
        [
            PromptArgument("analysis_type", "Analysis type", choices=tuple(WALLET_STRATEGIES)),
            PromptArgument("time_frame", "Time frame", choices=("current", "daily", "weekly", "monthly")),
        ],
    ),
    PromptDefinition(
        "redpacket-create-guide",
        "Create a red packet: creator, mint, claims and options.",
        "Red packet creation guide",
        _redpacket_create,
        [
            _chain_arg(),
            PromptArgument("creator", "Creator wallet address"),
            PromptArgument("mint", "Token mint address"),
            PromptArgument("max_claims", "Maximum number of claims"),
            _optional("total_amount", "Total amount to distribute"),
            _optional("fixed_amount", "Fixed amount per claim"),
            _optional("memo", "Memo"),
            _optional("password", "Claim password"),
            _optional("claim_authority", "Claim authority address"),
        ],
    ),
    PromptDefinition(
        "redpacket-claim-guide",
        "Claim a red packet by packet id or share id.",
        "Red packet claim guide",
        _redpacket_claim,
        [
            _chain_arg(),
            PromptArgument("claimer", "Claimer wallet address"),
            _optional("packet_id", "Red packet id"),
            _optional("share_id", "Red packet share id"),
            _optional("password", "Claim password"),
        ],
    ),
    PromptDefinition(
        "redpacket-get-guide",
        "Look up a red packet by id.",
        "Red packet query guide",
        _redpacket_get,
        [PromptArgument("id", "Red packet id")],
    ),
    PromptDefinition(
        "redpacket-get-claims-guide",
        "List the claim records of a red packet.",
        "Red packet claim records guide",
        _redpacket_records("the claim records", "get_redpacket_claims", "id"),
        [PromptArgument("id", "Red packet id")] + _paging_args(),
    ),
    PromptDefinition(
        "redpacket-get-list-guide",
        "List red packets filtered by creator or chain.",
        "Red packet list guide",
        _redpacket_records("red packets", "list_redpackets", None),
        _paging_args() + [_optional("creator", "Creator wallet address"), _optional("chain", CHAIN_HINT)],
    ),
    PromptDefinition(
        "redpacket-get-claims-by-address-guide",
        "List red packet claims made by a wallet.",
        "Red packet claims by address guide",
        _redpacket_records("red packet claims", "get_redpacket_claims_by_address", "address"),
        [PromptArgument("address", "Claimer wallet address")] + _paging_args(),
    ),
    PromptDefinition(
        "redpacket-get-by-address-guide",
        "List red packets created by a wallet.",
        "Red packets by creator guide",
        _redpacket_records("red packets created", "get_redpackets_by_address", "address"),
        [PromptArgument("address", "Creator wallet address")] + _paging_args(),
    ),
    PromptDefinition(
        "redpacket-send-guide",
        "Broadcast a signed red packet transaction.",
        "Red packet send guide",
        _redpacket_send,
        [_chain_arg(), PromptArgument("signed_tx", "Signed transaction payload")],
    ),
]


def describe_prompt(prompt: PromptDefinition) -> Dict[str, Any]:
    return {
        "name": prompt.name,
        "description": prompt.description,
        "arguments": [
            {"name": arg.name, "description": arg.description, "required": arg.required}
            for arg in prompt.arguments
        ],
    }


def render_prompt(prompt: PromptDefinition, arguments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Validate ``arguments`` and render the prompt's two-message conversation."""
    supplied = {
        key: str(value) for key, value in (arguments or {}).items() if value is not None and value != ""
    }
    for arg in prompt.arguments:
        value = supplied.get(arg.name)
        if value is None:
            if arg.required:
                raise PromptArgumentError(f"Missing required argument: {arg.name}")
            continue
        if arg.choices is not None and value not in arg.choices:
            raise PromptArgumentError(
                f"Invalid value for {arg.name}: {value}. Allowed: {', '.join(arg.choices)}"
            )

    user_text, assistant_text = prompt.renderer(supplied)
    return {
        "description": prompt.title,
        "messages": [
            {"role": "user", "content": {"type": "text", "text": user_text}},
            {"role": "assistant", "content": {"type": "text", "text": assistant_text}},
        ],
    }
