import logging

import pytest
from fastapi.testclient import TestClient

from dex_mcp import server as server_mod
from dex_mcp.dex_api import default_client
from dex_mcp.metrics import default_metrics
from dex_mcp.server import UNMATCHED_RESOURCE_KEY, JsonFormatter, _wrap_tool_result, app


@pytest.fixture
def client():
    return TestClient(app)


def test_health_route(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert "X-Request-ID" in resp.headers


def test_tool_route_returns_raw_envelope(monkeypatch, client):
    async def fake_wallet_balance(chain, wallet_address, *, access_token):
        return {"balances": [{"symbol": "SOL"}]}

    monkeypatch.setattr(default_client, "fetch_wallet_balance", fake_wallet_balance)
    resp = client.post(
        "/tools/get_wallet_balance",
        json={"chain": "sol", "wallet_address": "Wallet1"},
        headers={"Authorization": "Bearer abc"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["balanceInfo"]["balances"][0]["symbol"] == "SOL"


def test_tool_route_unknown_tool(client):
    resp = client.post("/tools/not_a_tool", json={})
    assert resp.status_code == 404


def test_tool_route_rejects_non_object_body(client):
    resp = client.post("/tools/get_latest_block", json=["sol"])
    assert resp.status_code == 400


def test_tool_route_without_token(client):
    resp = client.post("/tools/get_blockchain_list")
    assert resp.status_code == 200
    assert resp.json()["success"] is False


def test_rate_limit_response(monkeypatch, client):
    class DenyLimiter:
        async def allow(self, _key):
            return False

    monkeypatch.setattr(server_mod, "rate_limiter", DenyLimiter())
    resp = client.post("/tools/get_blockchain_list", json={})
    assert resp.status_code == 429
    assert resp.json() == {"jsonrpc": "2.0", "error": {"code": 429, "message": "Rate limit exceeded"}}

    rpc = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 1, "method": "resources/read", "params": {"uri": "mcp://dex/blockchain/list"}},
    )
    assert rpc.status_code == 429

    metrics = client.get("/metrics").json()
    assert metrics["rate_limited"] == 2


def test_metrics_count_tool_resource_and_prompt_outcomes(client):
    client.post("/tools/detect_address_type", json={"address": "bad"})
    client.post("/tools/get_blockchain_list", json={})
    client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "id": 1, "method": "resources/read", "params": {"uri": "mcp://dex/blockchain/list"}},
    )
    client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": 2,
            "method": "prompts/get",
            "params": {"name": "blockchain-list-guide"},
        },
    )

    snapshot = default_metrics.snapshot()
    assert snapshot["tool_success"] == {"detect_address_type": 1}
    assert snapshot["tool_error"] == {"get_blockchain_list": 1}
    assert snapshot["resource_error"] == {"blockchain_list": 1}
    assert snapshot["prompt_success"] == {"blockchain-list-guide": 1}
    assert snapshot["requests"] == 4


def test_resource_metrics_are_keyed_by_template_name(client):
    for index in range(5):
        client.post(
            "/mcp",
            json={
                "jsonrpc": "2.0",
                "id": index,
                "method": "resources/read",
                "params": {"uri": f"mcp://dex/token/sol/addr{index}?limit={index}"},
            },
        )
    for index in range(3):
        client.post(
            "/mcp",
            json={
                "jsonrpc": "2.0",
                "id": 10 + index,
                "method": "resources/read",
                "params": {"uri": f"mcp://dex/nothing/{index}"},
            },
        )

    snapshot = default_metrics.snapshot()
    assert snapshot["resource_error"] == {"token": 5, UNMATCHED_RESOURCE_KEY: 3}
    assert snapshot["resource_success"] == {}


def test_wrap_tool_result():
    wrapped = _wrap_tool_result({"success": True, "count": 1})
    assert wrapped["structuredContent"] == {"success": True, "count": 1}
    assert "isError" not in wrapped

    failed = _wrap_tool_result({"success": False, "error": "Failed to get token information", "message": "x"})
    assert failed["isError"] is True
    assert failed["content"] == [{"type": "text", "text": "Failed to get token information"}]


def test_json_formatter_includes_extras():
    record = logging.LogRecord("dex_mcp.server", logging.INFO, __file__, 1, "tool=%s", ("get_token",), None)
    record.tool = "get_token"
    record.request_id = "req-1"
    formatted = JsonFormatter().format(record)
    assert '"tool": "get_token"' in formatted
    assert '"request_id": "req-1"' in formatted
    assert '"message": "tool=get_token"' in formatted
