import json

from fastapi.testclient import TestClient

from dex_mcp.dex_api import default_client
from dex_mcp.server import MCP_SERVER_NAME, MCP_SERVER_VERSION, app

AUTH = {"Authorization": "Bearer test-jwt"}


def _rpc(client, method, params=None, rpc_id=1, headers=None):
    payload = {"jsonrpc": "2.0", "id": rpc_id, "method": method}
    if params is not None:
        payload["params"] = params
    return client.post("/mcp", json=payload, headers=headers or {})


def test_mcp_initialize_advertises_capabilities():
    client = TestClient(app)
    resp = _rpc(client, "initialize", {"protocolVersion": "2025-03-26", "capabilities": {}}, rpc_id=10)
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == 10
    result = data["result"]
    assert result["protocolVersion"] == "2025-03-26"
    assert result["serverInfo"] == {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION}
    for capability in ("tools", "resources", "prompts"):
        assert result["capabilities"][capability]["listChanged"] is False


def test_mcp_initialize_requires_protocol_version():
    client = TestClient(app)
    resp = _rpc(client, "initialize", {})
    assert resp.json()["error"]["code"] == -32602


def test_mcp_initialized_notification():
    client = TestClient(app)
    resp = client.post("/mcp", json={"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert resp.status_code == 204
    assert resp.content == b""


def test_mcp_parse_and_request_errors():
    client = TestClient(app)
    resp = client.post("/mcp", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == -32700

    resp = client.post("/mcp", json=[1, 2, 3])
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == -32600

    resp = client.post("/mcp", json={"jsonrpc": "2.0", "id": 3})
    assert resp.json()["error"]["code"] == -32600

    resp = _rpc(client, "tools/call", params=[1])
    assert resp.json()["error"]["code"] == -32602

    resp = _rpc(client, "does/not/exist")
    assert resp.json()["error"] == {"code": -32601, "message": "Method not found"}


def test_mcp_tools_list_includes_annotations():
    client = TestClient(app)
    for method in ("tools/list", "list_tools"):
        resp = _rpc(client, method)
        tools = {tool["name"]: tool for tool in resp.json()["result"]["tools"]}
        assert "get_hot_tokens" in tools
        send = tools["send_transaction"]
        assert send["annotations"]["destructiveHint"] is True
        assert send["annotations"]["readOnlyHint"] is False
        assert tools["get_token"]["annotations"]["readOnlyHint"] is True
        assert tools["get_token"]["inputSchema"]["required"] == ["chain", "token_address"]


def test_mcp_tools_call_success(monkeypatch):
    seen = {}

    async def fake_latest_block(chain, *, access_token):
        seen.update(chain=chain, token=access_token)
        return {"hash": "h", "height": 7}

    monkeypatch.setattr(default_client, "fetch_latest_block", fake_latest_block)
    client = TestClient(app)
    resp = _rpc(
        client,
        "tools/call",
        {"name": "get_latest_block", "arguments": {"chain": "sol"}},
        rpc_id=5,
        headers=AUTH,
    )
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert "isError" not in result
    assert result["structuredContent"]["latestBlock"]["height"] == 7
    assert json.loads(result["content"][0]["text"])["chain"] == "sol"
    assert seen == {"chain": "sol", "token": "test-jwt"}


def test_mcp_tools_call_without_token_is_in_band_error():
    client = TestClient(app)
    resp = _rpc(client, "call_tool", {"tool": "get_latest_block", "params": {"chain": "sol"}})
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["isError"] is True
    assert result["content"][0]["text"] == "Failed to get latest block information"
    assert result["structuredContent"]["success"] is False


def test_mcp_tools_call_unknown_and_bad_params():
    client = TestClient(app)
    unknown = _rpc(client, "tools/call", {"name": "nope", "arguments": {}}, headers=AUTH).json()["result"]
    assert unknown["isError"] is True
    assert unknown["content"][0]["text"] == "Unknown tool: nope"

    bad = _rpc(
        client, "tools/call", {"name": "get_latest_block", "arguments": {"bogus": 1}}, headers=AUTH
    ).json()["result"]
    assert bad["isError"] is True
    assert bad["content"][0]["text"] == "Invalid parameters."

    missing_name = _rpc(client, "tools/call", {"arguments": {}})
    assert missing_name.json()["error"]["code"] == -32602


def test_mcp_tools_call_ignores_token_in_arguments():
    client = TestClient(app)
    resp = _rpc(
        client,
        "tools/call",
        {"name": "get_latest_block", "arguments": {"chain": "sol", "access_token": "smuggled"}},
    )
    structured = resp.json()["result"]["structuredContent"]
    assert "Access token is required" in structured["message"]


def test_mcp_detect_address_type_without_auth():
    client = TestClient(app)
    resp = _rpc(client, "tools/call", {"name": "detect_address_type", "arguments": {"address": "0x" + "f" * 40}})
    assert resp.json()["result"]["structuredContent"]["addressType"] == "evm"


def test_mcp_resources_methods(monkeypatch):
    async def fake_blockchains(*, access_token):
        return [{"chain": "sol"}, {"chain": "sui"}]

    monkeypatch.setattr(default_client, "fetch_supported_blockchains", fake_blockchains)
    client = TestClient(app)

    templates = _rpc(client, "resources/templates/list").json()["result"]["resourceTemplates"]
    assert any(t["uriTemplate"] == "mcp://dex/token/{chain}/{tokenAddress}" for t in templates)

    resources = _rpc(client, "resources/list").json()["result"]["resources"]
    assert resources[0]["uri"] == "mcp://dex/blockchain/list"

    read = _rpc(client, "resources/read", {"uri": "mcp://dex/blockchain/list"}, headers=AUTH).json()
    content = read["result"]["contents"][0]
    assert json.loads(content["text"])["count"] == 2

    missing = _rpc(client, "resources/read", {"uri": "mcp://dex/nothing"}, headers=AUTH).json()
    assert missing["error"]["code"] == -32002

    no_uri = _rpc(client, "resources/read", {}).json()
    assert no_uri["error"]["code"] == -32602


def test_mcp_prompts_methods():
    client = TestClient(app)
    prompts = _rpc(client, "prompts/list").json()["result"]["prompts"]
    assert any(p["name"] == "hot-tokens-analysis" for p in prompts)

    got = _rpc(client, "prompts/get", {"name": "hot-tokens-analysis", "arguments": {"chain": "sol", "timeframe": "1h"}})
    messages = got.json()["result"]["messages"]
    assert messages[0]["role"] == "user"

    unknown = _rpc(client, "prompts/get", {"name": "nope"}).json()
    assert unknown["error"]["code"] == -32002

    bad_args = _rpc(client, "prompts/get", {"name": "hot-tokens-analysis", "arguments": {"chain": "sol"}}).json()
    assert bad_args["error"]["code"] == -32602
    assert "timeframe" in bad_args["error"]["message"]


def test_mcp_prompts_get_rejects_invalid_choice():
    client = TestClient(app)
    resp = _rpc(
        client,
        "prompts/get",
        {"name": "token-search-strategy", "arguments": {"search_type": "random", "investment_goal": "long-term"}},
    )
    assert resp.status_code == 200
    error = resp.json()["error"]
    assert error["code"] == -32602
    assert error["message"].startswith("Invalid value for search_type: random")

    listed = _rpc(client, "prompts/list").json()["result"]["prompts"]
    candles = next(p for p in listed if p["name"] == "token-candles-guide")
    resolution = next(a for a in candles["arguments"] if a["name"] == "resolution")
    assert resolution["required"] is True
