"""
DEX MCP server package.

Exposes DEX market data, trading, and red packet operations as MCP tools,
resources, and prompts backed by the upstream DEX REST API.
"""

__all__ = ["config"]
