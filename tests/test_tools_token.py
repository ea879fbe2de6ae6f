import pytest

from dex_mcp.dex_api.client import NotFoundError
from dex_mcp.tools import (
    get_token,
    get_token_candles,
    get_token_holders,
    get_token_metadata,
    get_token_pools,
    get_token_stats,
    search_tokens,
)

TOKEN = "test-jwt"
MINT = "So11111111111111111111111111111111111111112"


class StubClient:
    def __init__(self):
        self.calls = []

    async def fetch_token(self, chain, token_address, *, access_token):
        self.calls.append(("fetch_token", chain, token_address, {}))
        return {"address": token_address, "symbol": "SOL"}

    async def search_tokens(self, **kwargs):
        self.calls.append(("search_tokens", kwargs))
        return {"data": [{"symbol": f"T{i}"} for i in range(15)], "hasNext": True}

    async def fetch_token_metadata(self, chain, token_address, *, access_token):
        return {"name": "Wrapped SOL"}

    async def fetch_token_pools(self, chain, token_address, *, access_token):
        return [{"poolAddress": "P1"}]

    async def fetch_token_stats(self, chain, token_address, *, access_token):
        return {"volumesInUsd24h": "1000"}

    async def fetch_token_holders(self, chain, token_address, *, access_token, **kwargs):
        self.calls.append(("fetch_token_holders", chain, token_address, kwargs))
        return {"data": [{"wallet": "w1"}]}

    async def fetch_token_candles(self, chain, token_address, *, access_token, **kwargs):
        self.calls.append(("fetch_token_candles", chain, token_address, kwargs))
        return [{"open": 1, "close": 2}]


@pytest.mark.asyncio
async def test_get_token_happy_path():
    stub = StubClient()
    result = await get_token("sol", MINT, access_token=TOKEN, client=stub)
    assert result["success"] is True
    assert result["chain"] == "sol"
    assert result["tokenAddress"] == MINT
    assert result["tokenInfo"]["symbol"] == "SOL"
    assert stub.calls[0][1] == "sol"

    rejected = await get_token("solana", MINT, access_token=TOKEN, client=stub)
    assert rejected["success"] is False
    assert rejected["message"].startswith("Unsupported chain: solana.")
    assert len(stub.calls) == 1


@pytest.mark.asyncio
async def test_get_token_not_found():
    class MissingClient:
        async def fetch_token(self, *_args, **_kwargs):
            raise NotFoundError("Token not found")

    result = await get_token("sol", MINT, access_token=TOKEN, client=MissingClient())
    assert result == {
        "success": False,
        "error": "Failed to get token information",
        "chain": "sol",
        "tokenAddress": MINT,
        "message": "Token not found",
        "timestamp": result["timestamp"],
    }


@pytest.mark.asyncio
async def test_search_tokens_passes_params():
    stub = StubClient()
    result = await search_tokens(
        "sol",
        "bonk",
        limit=5,
        sort="desc",
        sort_by="marketCapInUsd",
        protocols="pump,moonshot",
        access_token=TOKEN,
        client=stub,
    )
    assert result["success"] is True
    assert result["query"] == "bonk"
    assert result["searchParams"]["protocols"] == ["pump", "moonshot"]
    _, kwargs = stub.calls[0]
    assert kwargs["chains"] == ["sol"]
    assert kwargs["q"] == "bonk"
    assert kwargs["sort_by"] == "marketCapInUsd"
    assert "totalCount" not in result


@pytest.mark.asyncio
async def test_search_tokens_trims_when_capped():
    result = await search_tokens("sol", "t", max_results=10, access_token=TOKEN, client=StubClient())
    assert result["results"] == [{"symbol": f"T{i}"} for i in range(10)]
    assert result["totalCount"] == 15
    assert result["returnedCount"] == 10


@pytest.mark.asyncio
async def test_search_tokens_total_count_comes_from_upstream_total():
    class PagedClient(StubClient):
        async def search_tokens(self, **kwargs):
            return {"data": [{"symbol": f"T{i}"} for i in range(20)], "total": 1234}

    result = await search_tokens("sol", "t", max_results=10, access_token=TOKEN, client=PagedClient())
    assert isinstance(result["results"], list)
    assert len(result["results"]) == 10
    assert result["totalCount"] == 1234
    assert result["returnedCount"] == 10


@pytest.mark.asyncio
async def test_search_tokens_validation():
    result = await search_tokens("sol", "", access_token=TOKEN, client=StubClient())
    assert result["message"] == "Search query is required."

    result = await search_tokens("sol", "x", sort="sideways", access_token=TOKEN, client=StubClient())
    assert result["message"].startswith("Invalid sort: sideways")

    result = await search_tokens("sol", "x", sort_by="vibes", access_token=TOKEN, client=StubClient())
    assert result["message"].startswith("Invalid sortBy field: vibes")


@pytest.mark.asyncio
async def test_token_detail_tools():
    stub = StubClient()
    metadata = await get_token_metadata("sol", MINT, access_token=TOKEN, client=stub)
    pools = await get_token_pools("sol", MINT, access_token=TOKEN, client=stub)
    stats = await get_token_stats("sol", MINT, access_token=TOKEN, client=stub)
    assert metadata["metadata"]["name"] == "Wrapped SOL"
    assert pools["pools"][0]["poolAddress"] == "P1"
    assert stats["stats"]["volumesInUsd24h"] == "1000"


@pytest.mark.asyncio
async def test_token_detail_error_labels():
    metadata = await get_token_metadata("sol", MINT)
    assert metadata["error"] == "Failed to get token metadata"
    pools = await get_token_pools("sol", "", access_token=TOKEN)
    assert pools["error"] == "Failed to get token pools"
    assert pools["message"] == "Token address is required."


@pytest.mark.asyncio
async def test_token_holders_paging():
    stub = StubClient()
    result = await get_token_holders("sol", MINT, limit=50, direction="prev", access_token=TOKEN, client=stub)
    assert result["holders"]["data"][0]["wallet"] == "w1"
    assert stub.calls[0][3] == {"cursor": None, "limit": 50, "direction": "prev"}

    bad = await get_token_holders("sol", MINT, direction="sideways", access_token=TOKEN, client=stub)
    assert bad["error"] == "Failed to get token holders"
    assert bad["message"].startswith("Invalid direction")


@pytest.mark.asyncio
async def test_token_holders_token_checked_first():
    result = await get_token_holders("sol", MINT, limit=1000)
    assert "Access token is required" in result["message"]


@pytest.mark.asyncio
async def test_token_candles():
    stub = StubClient()
    result = await get_token_candles(
        "sol", MINT, "1h", from_time="1700000000000", to_time=1700003600000, access_token=TOKEN, client=stub
    )
    assert result["candles"][0]["close"] == 2
    assert stub.calls[0][3] == {
        "resolution": "1h",
        "from_time": 1700000000000,
        "to_time": 1700003600000,
        "limit": None,
    }

    bad = await get_token_candles("sol", MINT, "2h", access_token=TOKEN, client=stub)
    assert bad["message"].startswith("Invalid resolution: 2h")

    missing = await get_token_candles("sol", MINT, "", access_token=TOKEN, client=stub)
    assert missing["message"] == "Resolution is required."
