import pytest

from dex_mcp.dex_api.client import ApiUnreachableError, UnauthorizedError
from dex_mcp.tools import (
    detect_address_type,
    get_blockchain_list,
    get_dex_list,
    get_dexpool_detail,
    get_latest_block,
)

TOKEN = "test-jwt"


@pytest.mark.asyncio
async def test_blockchain_list_happy_path():
    class StubClient:
        async def fetch_supported_blockchains(self, *, access_token):
            assert access_token == TOKEN
            return [{"chain": "sol"}, {"chain": "base"}]

    result = await get_blockchain_list(access_token=TOKEN, client=StubClient())
    assert result["success"] is True
    assert result["count"] == 2
    assert result["blockchains"][0]["chain"] == "sol"


@pytest.mark.asyncio
async def test_blockchain_list_requires_token():
    class StubClient:
        async def fetch_supported_blockchains(self, **_kwargs):
            raise AssertionError("should not be called")

    result = await get_blockchain_list(client=StubClient())
    assert result["success"] is False
    assert result["error"] == "Failed to get blockchain list"
    assert "Access token is required" in result["message"]


@pytest.mark.asyncio
async def test_latest_block_passes_chain_through():
    calls = {}

    class StubClient:
        async def fetch_latest_block(self, chain, *, access_token):
            calls["chain"] = chain
            return {"hash": "h", "height": 42}

    result = await get_latest_block("ethereum", access_token=TOKEN, client=StubClient())
    assert calls["chain"] == "ethereum"
    assert result["chain"] == "ethereum"
    assert result["latestBlock"]["height"] == 42


@pytest.mark.asyncio
async def test_latest_block_rejects_uppercase_and_alias_chains():
    class StubClient:
        async def fetch_latest_block(self, chain, *, access_token):
            raise AssertionError("upstream must not be called")

    for chain in ("ETH", "eth"):
        result = await get_latest_block(chain, access_token=TOKEN, client=StubClient())
        assert result["success"] is False
        assert result["chain"] == chain
        assert result["message"].startswith(f"Unsupported chain: {chain}.")


@pytest.mark.asyncio
async def test_latest_block_token_checked_before_chain():
    result = await get_latest_block("doge")
    assert "Access token is required" in result["message"]
    result = await get_latest_block("doge", access_token=TOKEN)
    assert result["message"].startswith("Unsupported chain: doge")
    assert result["chain"] == "doge"


@pytest.mark.asyncio
async def test_latest_block_upstream_errors():
    class UnauthorizedClient:
        async def fetch_latest_block(self, *_args, **_kwargs):
            raise UnauthorizedError("token expired")

    class UnreachableClient:
        async def fetch_latest_block(self, *_args, **_kwargs):
            raise ApiUnreachableError("DEX API unreachable")

    result = await get_latest_block("sol", access_token=TOKEN, client=UnauthorizedClient())
    assert result["error"] == "Failed to get latest block information"
    assert result["message"] == "token expired"

    result = await get_latest_block("sol", access_token=TOKEN, client=UnreachableClient())
    assert result["message"] == "DEX API unreachable"


@pytest.mark.asyncio
async def test_unexpected_exception_is_enveloped():
    class BrokenClient:
        async def fetch_latest_block(self, *_args, **_kwargs):
            raise RuntimeError("kaboom")

    result = await get_latest_block("sol", access_token=TOKEN, client=BrokenClient())
    assert result["success"] is False
    assert result["message"] == "kaboom"


@pytest.mark.asyncio
async def test_dex_list_splits_chains_and_counts():
    seen = {}

    class StubClient:
        async def list_dexes(self, *, access_token, chains, limit, dex_program):
            seen.update(chains=chains, limit=limit, dex_program=dex_program)
            return {"data": [{"name": "raydium"}, {"name": "orca"}], "hasNext": False}

    result = await get_dex_list(["sol,ethereum"], limit=5, access_token=TOKEN, client=StubClient())
    assert result["success"] is True
    assert seen == {"chains": ["sol", "ethereum"], "limit": 5, "dex_program": None}
    assert result["chains"] == ["sol", "ethereum"]
    assert result["count"] == 2


@pytest.mark.asyncio
async def test_dex_list_validation():
    result = await get_dex_list([], access_token=TOKEN)
    assert result["message"] == "At least one chain is required."

    result = await get_dex_list(["sol", "nope"], access_token=TOKEN)
    assert result["message"].startswith("Unsupported chain: nope")

    result = await get_dex_list(["sol"], limit=500, access_token=TOKEN)
    assert result["message"] == "Limit must be between 1 and 100"
    assert result["limit"] == 500


@pytest.mark.asyncio
async def test_dexpool_detail():
    class StubClient:
        async def fetch_dexpool(self, chain, pool_address, *, access_token):
            return {"poolAddress": pool_address, "tvlInUsd": "100"}

    result = await get_dexpool_detail("sol", "POOL1", access_token=TOKEN, client=StubClient())
    assert result["poolAddress"] == "POOL1"
    assert result["poolDetail"]["tvlInUsd"] == "100"

    missing = await get_dexpool_detail("sol", "", access_token=TOKEN, client=StubClient())
    assert missing["error"] == "Failed to get DEX pool detail"
    assert missing["message"] == "Pool address is required."


def test_detect_address_type_tool_needs_no_token():
    result = detect_address_type("0x" + "1" * 40)
    assert result["success"] is True
    assert result["addressType"] == "evm"
    assert detect_address_type("nope")["addressType"] == "invalid"
