"""Red packet tools: create, claim, query, list, and broadcast."""

from __future__ import annotations

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
    require_text,
    success_envelope,
)
from dex_mcp.tools.validators import RECORD_DIRECTIONS, clamp_limit, parse_optional_int

logger = logging.getLogger(__name__)


def _paging(cursor: Optional[str], limit: Any, direction: Optional[str], config: DexConfig) -> Dict[str, Any]:
    require_choice(direction, RECORD_DIRECTIONS, "direction")
    return {
        "cursor": cursor or "",
        "limit": clamp_limit(limit, default=config.default_page_limit, maximum=config.max_page_limit),
        "direction": direction or "desc",
    }


def _records_envelope(echo: Dict[str, Any], result: Any) -> Dict[str, Any]:
    page = result if isinstance(result, dict) else {}
    records = page.get("records")
    return success_envelope(
        **echo,
        result=result,
        count=len(records) if isinstance(records, list) else 0,
        pagination={
            "total": page.get("total"),
            "hasNextPage": page.get("hasNextPage"),
            "startCursor": page.get("startCursor"),
            "endCursor": page.get("endCursor"),
        },
    )


def _field(result: Any, key: str) -> Any:
    return result.get(key) if isinstance(result, dict) else None


async def create_redpacket(
    chain: str,
    creator: str,
    mint: str,
    max_claims: int,
    *,
    total_amount: Optional[str] = None,
    fixed_amount: Optional[str] = None,
    memo: Optional[str] = None,
    password: Optional[str] = None,
    claim_authority: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """
    Build an unsigned red packet creation transaction.

    The returned ``txSerialize`` must be signed by ``creator`` and broadcast
    with ``send_redpacket``.
    """
    label = "Failed to create red packet"
    echo = {"chain": chain, "creator": creator}
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        owner = require_text(creator, "Creator address")
        token_mint = require_text(mint, "Token mint")
        claims = parse_optional_int(max_claims)
        if claims is None or claims < 1:
            raise ToolInputError("maxClaims must be a positive integer.")
        result = await client.create_redpacket(
            chain_id,
            {
                "creator": owner,
                "mint": token_mint,
                "maxClaims": claims,
                "totalAmount": total_amount,
                "fixedAmount": fixed_amount,
                "memo": memo,
                "password": password,
                "claimAuthority": claim_authority,
            },
            access_token=token,
        )
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error creating red packet on %s", chain)
        return error_envelope(label, exc, **echo)

    return success_envelope(
        **echo,
        txSerialize=_field(result, "txSerialize"),
        shareId=_field(result, "shareId"),
    )


async def claim_redpacket(
    chain: str,
    claimer: str,
    *,
    packet_id: Optional[str] = None,
    share_id: Optional[str] = None,
    password: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """Build an unsigned claim transaction for ``claimer``."""
    label = "Failed to claim red packet"
    echo = {"chain": chain, "claimer": claimer}
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        wallet = require_text(claimer, "Claimer address")
        if not packet_id and not share_id:
            raise ToolInputError("Either packetId or shareId is required.")
        result = await client.claim_redpacket(
            chain_id,
            {
                "claimer": wallet,
                "packetId": packet_id or None,
                "shareId": share_id or None,
                "password": password,
            },
            access_token=token,
        )
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error claiming red packet on %s", chain)
        return error_envelope(label, exc, **echo)

    return success_envelope(**echo, txSerialize=_field(result, "txSerialize"))


async def get_redpacket(
    id: str,
    *,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    label = "Failed to query red packet"
    try:
        token = require_access_token(access_token)
        packet_id = require_text(id, "Red packet id")
        result = await client.fetch_redpacket(packet_id, access_token=token)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, id=id)
    except Exception as exc:
        logger.exception("Unexpected error fetching red packet %s", id)
        return error_envelope(label, exc, id=id)

    return success_envelope(id=id, result=result)


async def get_redpacket_claims(
    id: str,
    *,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
    direction: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
    config: DexConfig = default_config,
) -> Dict[str, Any]:
    """Claim records for a single red packet."""
    label = "Failed to get red packet claim records"
    try:
        token = require_access_token(access_token)
        packet_id = require_text(id, "Red packet id")
        paging = _paging(cursor, limit, direction, config)
        result = await client.fetch_redpacket_claims(packet_id, access_token=token, **paging)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, id=id)
    except Exception as exc:
        logger.exception("Unexpected error fetching claims for red packet %s", id)
        return error_envelope(label, exc, id=id)

    return _records_envelope({"id": id}, result)


async def list_redpackets(
    *,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
    direction: Optional[str] = None,
    creator: Optional[str] = None,
    chain: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
    config: DexConfig = default_config,
) -> Dict[str, Any]:
    """
    List red packets, optionally narrowed to a creator or chain.
    """
    label = "Failed to get red packet list"
    filters = {
        key: value
        for key, value in {
            "cursor": cursor,
            "limit": limit,
            "direction": direction,
            "creator": creator,
            "chain": chain,
        }.items()
        if value is not None
    }
    echo = {"filters": filters}
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain) if chain else None
        paging = _paging(cursor, limit, direction, config)
        result = await client.list_redpackets(
            access_token=token, creator=creator or None, chain=chain_id, **paging
        )
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, **echo)
    except Exception as exc:
        logger.exception("Unexpected error listing red packets")
        return error_envelope(label, exc, **echo)

    return _records_envelope(echo, result)


async def get_redpacket_claims_by_address(
    address: str,
    *,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
    direction: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
    config: DexConfig = default_config,
) -> Dict[str, Any]:
    """Red packets claimed by a wallet."""
    label = "Failed to get red packet claim records by address"
    try:
        token = require_access_token(access_token)
        wallet = require_text(address, "Wallet address")
        paging = _paging(cursor, limit, direction, config)
        result = await client.fetch_redpacket_claims_by_address(wallet, access_token=token, **paging)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, address=address)
    except Exception as exc:
        logger.exception("Unexpected error fetching red packet claims for %s", address)
        return error_envelope(label, exc, address=address)

    return _records_envelope({"address": address}, result)


async def get_redpackets_by_address(
    address: str,
    *,
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
    direction: Optional[str] = None,
    access_token: Optional[str] = None,
    client=default_client,
    config: DexConfig = default_config,
) -> Dict[str, Any]:
    """Red packets created by a wallet."""
    label = "Failed to get red packets by address"
    try:
        token = require_access_token(access_token)
        wallet = require_text(address, "Wallet address")
        paging = _paging(cursor, limit, direction, config)
        result = await client.fetch_redpackets_by_address(wallet, access_token=token, **paging)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, address=address)
    except Exception as exc:
        logger.exception("Unexpected error fetching red packets created by %s", address)
        return error_envelope(label, exc, address=address)

    return _records_envelope({"address": address}, result)


async def send_redpacket(
    chain: str,
    signed_tx: str,
    *,
    access_token: Optional[str] = None,
    client=default_client,
) -> Dict[str, Any]:
    """Broadcast a signed red packet create or claim transaction."""
    label = "Failed to send red packet transaction"
    try:
        token = require_access_token(access_token)
        chain_id = require_chain(chain)
        payload = require_text(signed_tx, "Signed transaction")
        result = await client.send_redpacket(chain_id, payload, access_token=token)
    except (ToolInputError, DexApiError) as exc:
        return error_envelope(label, exc, chain=chain)
    except Exception as exc:
        logger.exception("Unexpected error sending red packet transaction on %s", chain)
        return error_envelope(label, exc, chain=chain)

    return success_envelope(chain=chain, signature=_field(result, "signature"))
