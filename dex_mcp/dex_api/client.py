"""
Thin HTTP client for the DEX data and trading REST API.

Every call carries the caller's bearer token. Upstream failures are mapped to
internal exceptions that the tool layer turns into error envelopes.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from dex_mcp.config import DexConfig, default_config

logger = logging.getLogger(__name__)


class DexApiError(Exception):
    """Base exception for DEX API errors."""

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class UnauthorizedError(DexApiError):
    """Raised when the access token is missing, expired, or rejected."""


class NotFoundError(DexApiError):
    """Raised when the requested chain object does not exist."""


class RateLimitedError(DexApiError):
    """Raised when the upstream API throttles the caller."""


class ApiUnreachableError(DexApiError):
    """Raised when the upstream API cannot be reached."""


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


def _compact(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class DexApiClient:
    """Async client for the DEX REST API surface used by the MCP tools."""

    def __init__(
        self,
        config: DexConfig | None = None,
        *,
        async_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or default_config
        self._client: Optional[httpx.AsyncClient] = async_client
        self._owns_client = async_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url, timeout=self.config.timeout
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _map_error(self, status_code: int, code: Optional[str], message: Optional[str]) -> DexApiError:
        if status_code in {401, 403}:
            return UnauthorizedError(
                message or "Unauthorized or invalid access token.", code=code, status_code=status_code
            )
        if status_code == 404:
            return NotFoundError(message or "Resource not found.", code=code, status_code=status_code)
        if status_code == 429:
            return RateLimitedError(
                message or "Upstream rate limit exceeded.", code=code, status_code=status_code
            )
        return DexApiError(message or "DEX API error.", code=code, status_code=status_code)

    def _process_response(self, response: httpx.Response) -> Any:
        try:
            data = response.json()
        except ValueError:
            data = None

        if response.status_code >= 400:
            code: Optional[str] = None
            message: Optional[str] = None
            if isinstance(data, dict):
                raw_code = data.get("code") or data.get("error")
                if isinstance(raw_code, (str, int)):
                    code = str(raw_code)
                raw_message = data.get("message")
                if isinstance(raw_message, str) and raw_message.strip():
                    message = raw_message.strip()
            raise self._map_error(response.status_code, code, message)

        if data is None:
            raise DexApiError("Unexpected response from DEX API.", status_code=response.status_code)
        return data

    async def _request(
        self,
        method: str,
        path: str,
        *,
        access_token: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {access_token}", "Accept": "application/json"}
        try:
            response = await client.request(
                method,
                path,
                params=_compact(params) if params else None,
                json=json_body,
                headers=headers,
            )
        except httpx.RequestError as exc:
            logger.warning("DEX API unreachable for %s %s", method, path)
            raise ApiUnreachableError("DEX API unreachable") from exc
        return self._process_response(response)

    # Blockchain

    async def fetch_supported_blockchains(self, *, access_token: str) -> List[Dict[str, Any]]:
        """List blockchains supported by the upstream API."""
        return await self._request("GET", "/v1/blockchain", access_token=access_token)

    async def fetch_latest_block(self, chain: str, *, access_token: str) -> Dict[str, Any]:
        """Return the latest block hash and height for ``chain``."""
        return await self._request(
            "GET", f"/v1/blockchain/{_segment(chain)}/latest_block", access_token=access_token
        )

    # DEX and pools

    async def list_dexes(
        self,
        *,
        access_token: str,
        chains: List[str],
        limit: Optional[int] = None,
        dex_program: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "GET",
            "/v1/dex",
            access_token=access_token,
            params={"chains": chains, "limit": limit, "dexProgram": dex_program},
        )

    async def fetch_dexpool(self, chain: str, pool_address: str, *, access_token: str) -> Dict[str, Any]:
        return await self._request(
            "GET",
            f"/v1/dexpools/{_segment(chain)}/{_segment(pool_address)}",
            access_token=access_token,
        )

    # Tokens

    async def fetch_token(self, chain: str, token_address: str, *, access_token: str) -> Dict[str, Any]:
        return await self._request(
            "GET", f"/v1/token/{_segment(chain)}/{_segment(token_address)}", access_token=access_token
        )

    async def search_tokens(
        self,
        *,
        access_token: str,
        chains: List[str],
        q: str,
        limit: Optional[int] = None,
        sort: Optional[str] = None,
        sort_by: Optional[str] = None,
        protocols: Optional[List[str]] = None,
        cursor: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request(
            "GET",
            "/v1/token/search",
            access_token=access_token,
            params={
                "chains": chains,
                "q": q,
                "limit": limit,
                "sort": sort,
                "sortBy": sort_by,
                "protocols": protocols,
                "cursor": cursor,
            },
        )

    async def _fetch_token_detail(
        self, chain: str, token_address: str, suffix: str, *, access_token: str, params=None
    ) -> Any:
        return await self._request(
            "GET",
            f"/v1/token/{_segment(chain)}/{_segment(token_address)}/{suffix}",
            access_token=access_token,
            params=params,
        )

    async def fetch_token_metadata(self, chain: str, token_address: str, *, access_token: str) -> Dict[str, Any]:
        return await self._fetch_token_detail(chain, token_address, "metadata", access_token=access_token)

    async def fetch_token_pools(self, chain: str, token_address: str, *, access_token: str) -> Any:
        return await self._fetch_token_detail(chain, token_address, "pools", access_token=access_token)

    async def fetch_token_stats(self, chain: str, token_address: str, *, access_token: str) -> Dict[str, Any]:
        return await self._fetch_token_detail(chain, token_address, "stats", access_token=access_token)

    async def fetch_token_holders(
        self,
        chain: str,
        token_address: str,
        *,
        access_token: str,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
        direction: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._fetch_token_detail(
            chain,
            token_address,
            "holders",
            access_token=access_token,
            params={"cursor": cursor, "limit": limit, "direction": direction},
        )

    async def fetch_token_candles(
        self,
        chain: str,
        token_address: str,
        *,
        access_token: str,
        resolution: str,
        from_time: Optional[int] = None,
        to_time: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Any:
        return await self._fetch_token_detail(
            chain,
            token_address,
            "candles",
            access_token=access_token,
            params={"resolution": resolution, "from": from_time, "to": to_time, "limit": limit},
        )

    # Rankings

    async def fetch_hot_tokens(
        self,
        chain: str,
        duration: str,
        *,
        access_token: str,
        sort_by: Optional[str] = None,
        sort_direction: Optional[str] = None,
        filter_by: Any = None,
    ) -> Any:
        params: Dict[str, Any] = {"sortBy": sort_by, "sortDirection": sort_direction}
        if filter_by is not None:
            params["filterBy"] = filter_by if isinstance(filter_by, str) else _json_param(filter_by)
        return await self._request(
            "GET",
            f"/v1/ranking/{_segment(chain)}/hotTokens/{_segment(duration)}",
            access_token=access_token,
            params=params,
        )

    async def fetch_ranking(self, chain: str, category: str, *, access_token: str) -> Any:
        """Fetch a fixed ranking list (newTokens, stocks, finalStretch, migrated)."""
        return await self._request(
            "GET", f"/v1/ranking/{_segment(chain)}/{_segment(category)}", access_token=access_token
        )

    # Trades

    async def fetch_trades(self, chain: str, *, access_token: str, **filters: Any) -> Dict[str, Any]:
        return await self._request(
            "GET", f"/v1/trade/{_segment(chain)}", access_token=access_token, params=filters
        )

    async def fetch_top_traders(self, chain: str, *, access_token: str, **filters: Any) -> Dict[str, Any]:
        return await self._request(
            "GET", f"/v1/trade/{_segment(chain)}/top-traders", access_token=access_token, params=filters
        )

    async def fetch_gainers_losers(self, chain: str, *, access_token: str, **filters: Any) -> Dict[str, Any]:
        return await self._request(
            "GET", f"/v1/trade/{_segment(chain)}/gainers-losers", access_token=access_token, params=filters
        )

    async def fetch_activities(self, chain: str, *, access_token: str, **filters: Any) -> Dict[str, Any]:
        return await self._request(
            "GET", f"/v1/trade/{_segment(chain)}/activities", access_token=access_token, params=filters
        )

    # Transactions and wallets

    async def send_transaction(self, chain: str, signed_tx: str, *, access_token: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/v1/transaction/{_segment(chain)}/send",
            access_token=access_token,
            json_body={"signedTx": signed_tx},
        )

    async def fetch_wallet_balance(self, chain: str, wallet_address: str, *, access_token: str) -> Any:
        return await self._request(
            "GET",
            f"/v1/wallet/{_segment(chain)}/{_segment(wallet_address)}/balance",
            access_token=access_token,
        )

    # Red packets

    async def create_redpacket(self, chain: str, payload: Dict[str, Any], *, access_token: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/v1/redpacket/{_segment(chain)}/create",
            access_token=access_token,
            json_body=_compact(payload),
        )

    async def claim_redpacket(self, chain: str, payload: Dict[str, Any], *, access_token: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/v1/redpacket/{_segment(chain)}/claim",
            access_token=access_token,
            json_body=_compact(payload),
        )

    async def send_redpacket(self, chain: str, signed_tx: str, *, access_token: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/v1/redpacket/{_segment(chain)}/send",
            access_token=access_token,
            json_body={"signedTx": signed_tx},
        )

    async def fetch_redpacket(self, packet_id: str, *, access_token: str) -> Dict[str, Any]:
        return await self._request("GET", f"/v1/redpacket/{_segment(packet_id)}", access_token=access_token)

    async def fetch_redpacket_claims(self, packet_id: str, *, access_token: str, **paging: Any) -> Dict[str, Any]:
        return await self._request(
            "GET", f"/v1/redpacket/{_segment(packet_id)}/claims", access_token=access_token, params=paging
        )

    async def list_redpackets(self, *, access_token: str, **filters: Any) -> Dict[str, Any]:
        return await self._request("GET", "/v1/redpacket", access_token=access_token, params=filters)

    async def fetch_redpacket_claims_by_address(
        self, address: str, *, access_token: str, **paging: Any
    ) -> Dict[str, Any]:
        return await self._request(
            "GET",
            f"/v1/redpacket/wallet/{_segment(address)}/claims",
            access_token=access_token,
            params=paging,
        )

    async def fetch_redpackets_by_address(self, address: str, *, access_token: str, **paging: Any) -> Dict[str, Any]:
        return await self._request(
            "GET",
            f"/v1/redpacket/wallet/{_segment(address)}/redpackets",
            access_token=access_token,
            params=paging,
        )


def _json_param(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"))


default_client = DexApiClient()
