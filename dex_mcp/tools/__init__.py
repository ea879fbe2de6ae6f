"""LLM-facing tool implementations."""

from .address import detect_address_type
from .blockchain import get_blockchain_list, get_latest_block
from .dex import get_dex_list
from .dexpool import get_dexpool_detail
from .token import (
    get_token,
    search_tokens,
    get_token_metadata,
    get_token_pools,
    get_token_stats,
    get_token_holders,
    get_token_candles,
)
from .ranking import (
    get_hot_tokens,
    get_new_tokens,
    get_stocks_tokens,
    get_final_stretch_tokens,
    get_migrated_tokens,
)
from .trade import get_trade_list, get_top_traders, get_gainers_losers, get_trade_activities
from .transaction import send_transaction
from .wallet import get_wallet_balance
from .redpacket import (
    create_redpacket,
    claim_redpacket,
    get_redpacket,
    get_redpacket_claims,
    list_redpackets,
    get_redpacket_claims_by_address,
    get_redpackets_by_address,
    send_redpacket,
)

__all__ = [
    "detect_address_type",
    "get_blockchain_list",
    "get_latest_block",
    "get_dex_list",
    "get_dexpool_detail",
    "get_token",
    "search_tokens",
    "get_token_metadata",
    "get_token_pools",
    "get_token_stats",
    "get_token_holders",
    "get_token_candles",
    "get_hot_tokens",
    "get_new_tokens",
    "get_stocks_tokens",
    "get_final_stretch_tokens",
    "get_migrated_tokens",
    "get_trade_list",
    "get_top_traders",
    "get_gainers_losers",
    "get_trade_activities",
    "send_transaction",
    "get_wallet_balance",
    "create_redpacket",
    "claim_redpacket",
    "get_redpacket",
    "get_redpacket_claims",
    "list_redpackets",
    "get_redpacket_claims_by_address",
    "get_redpackets_by_address",
    "send_redpacket",
]
