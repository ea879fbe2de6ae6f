import asyncio

import pytest

from dex_mcp.config import DexConfig, _load_port, _load_timeout, _parse_tool_rate_limits
from dex_mcp.metrics import MAX_TRACKED_DURATIONS, MetricsRecorder
from dex_mcp.rate_limiter import PerKeyRateLimiter


def test_load_timeout_invalid_env(monkeypatch):
    monkeypatch.setenv("DEX_MCP_HTTP_TIMEOUT", "not-a-number")
    assert _load_timeout() == 10.0


def test_load_timeout_valid_env(monkeypatch):
    monkeypatch.setenv("DEX_MCP_HTTP_TIMEOUT", "5.5")
    assert _load_timeout() == 5.5


def test_load_port(monkeypatch):
    monkeypatch.setenv("DEX_MCP_PORT", "8080")
    assert _load_port() == 8080
    monkeypatch.setenv("DEX_MCP_PORT", "eighty")
    assert _load_port() == 3030


def test_parse_tool_rate_limits_skips_malformed():
    assert _parse_tool_rate_limits(None) == {}
    assert _parse_tool_rate_limits("get_token=2, search_tokens=0.5,bad,x=abc,neg=-1") == {
        "get_token": 2.0,
        "search_tokens": 0.5,
    }


def test_config_defaults():
    config = DexConfig()
    assert config.max_page_limit == 100
    assert config.default_page_limit == 20
    assert config.max_ranking_results == 10
    assert config.max_top_traders == 10
    assert DexConfig().per_tool_rate_limits is not config.per_tool_rate_limits


def test_metrics_recorder_buckets():
    recorder = MetricsRecorder()
    recorder.incr_request()
    recorder.record_call("tool", "get_token", success=True)
    recorder.record_call("tool", "get_token", success=False)
    recorder.record_call("resource", "blockchain_list", success=True)
    recorder.record_call("prompt", "token-research-guide", success=False)
    snapshot = recorder.snapshot()
    assert snapshot["requests"] == 1
    assert snapshot["tool_success"] == {"get_token": 1}
    assert snapshot["tool_error"] == {"get_token": 1}
    assert snapshot["resource_success"] == {"blockchain_list": 1}
    assert snapshot["prompt_error"] == {"token-research-guide": 1}

    recorder.reset()
    assert recorder.snapshot()["tool_success"] == {}


def test_metrics_durations_are_bounded():
    recorder = MetricsRecorder()
    for index in range(MAX_TRACKED_DURATIONS + 5):
        recorder.record_duration(f"req-{index}", float(index))
    durations = recorder.snapshot()["recent_request_durations_ms"]
    assert len(durations) == MAX_TRACKED_DURATIONS
    assert "req-0" not in durations


@pytest.mark.asyncio
async def test_per_key_rate_limiter_allows_then_blocks():
    limiter = PerKeyRateLimiter(rate_per_sec=1, burst=1)
    assert await limiter.allow("tool")
    assert not await limiter.allow("tool")
    # Other keys have their own bucket.
    assert await limiter.allow("other")
    await asyncio.sleep(1.05)
    assert await limiter.allow("tool")


@pytest.mark.asyncio
async def test_per_tool_override():
    limiter = PerKeyRateLimiter(rate_per_sec=10, burst=5, per_tool={"send_transaction": 0.1})
    assert await limiter.allow("send_transaction")
    assert await limiter.allow("get_token")
    slow = limiter._limiters["send_transaction"]
    fast = limiter._limiters["get_token"]
    assert slow.bucket.rate == pytest.approx(0.1)
    assert slow.bucket.capacity == 1.0
    assert fast.bucket.rate == pytest.approx(10)
