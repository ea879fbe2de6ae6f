"""
Configuration helpers for the DEX MCP server.

This module centralizes the upstream base URL, default timeouts, logging
settings, rate limits, and paging limits. Access tokens are never configured
here; every request must carry its own bearer token.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict

# Default connection settings
DEFAULT_BASE_URL = os.getenv("DEX_MCP_BASE_URL", "https://api-dex.chainstream.io")


def _load_float(env_var: str, default: float) -> float:
    raw_value = os.getenv(env_var)
    if raw_value:
        try:
            return float(raw_value)
        except ValueError:
            return default
    return default


def _load_timeout() -> float:
    return _load_float("DEX_MCP_HTTP_TIMEOUT", 10.0)


def _load_port() -> int:
    raw_port = os.getenv("DEX_MCP_PORT")
    if raw_port:
        try:
            return int(raw_port)
        except ValueError:
            return 3030
    return 3030


def _parse_tool_rate_limits(raw: str | None) -> Dict[str, float]:
    """Parse ``tool=qps,tool2=qps`` into a mapping, skipping malformed entries."""
    limits: Dict[str, float] = {}
    if not raw:
        return limits
    for entry in raw.split(","):
        name, sep, value = entry.partition("=")
        name = name.strip()
        if not sep or not name:
            continue
        try:
            rate = float(value)
        except ValueError:
            continue
        if rate > 0:
            limits[name] = rate
    return limits


DEFAULT_TIMEOUT = _load_timeout()

# Paging limits
MAX_PAGE_LIMIT = 100
DEFAULT_PAGE_LIMIT = 20
MAX_RANKING_RESULTS = 10
MAX_SEARCH_RESOURCE_RESULTS = 10
MAX_TOP_TRADERS = 10
DEFAULT_TOP_TRADERS = 10

DEFAULT_RATE_LIMIT_QPS = _load_float("DEX_MCP_RATE_LIMIT_QPS", 5.0)
LOG_LEVEL = os.getenv("DEX_MCP_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("DEX_MCP_LOG_FORMAT", "json")  # json or plain
HOST = os.getenv("DEX_MCP_HOST", "0.0.0.0")
PORT = _load_port()
PER_TOOL_RATE_LIMITS = _parse_tool_rate_limits(os.getenv("DEX_MCP_TOOL_RATE_LIMITS"))


@dataclass(slots=True)
class DexConfig:
    """Runtime configuration for the DEX API adapter."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_page_limit: int = MAX_PAGE_LIMIT
    default_page_limit: int = DEFAULT_PAGE_LIMIT
    max_ranking_results: int = MAX_RANKING_RESULTS
    max_search_resource_results: int = MAX_SEARCH_RESOURCE_RESULTS
    max_top_traders: int = MAX_TOP_TRADERS
    default_top_traders: int = DEFAULT_TOP_TRADERS
    rate_limit_qps: float = DEFAULT_RATE_LIMIT_QPS
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT
    host: str = HOST
    port: int = PORT
    per_tool_rate_limits: dict[str, float] = field(default_factory=lambda: dict(PER_TOOL_RATE_LIMITS))


default_config = DexConfig()
