"""FastAPI application wiring DEX MCP tools, resources, and prompts to HTTP routes."""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from dex_mcp import mcp
from dex_mcp.config import default_config
from dex_mcp.dex_api import default_client
from dex_mcp.metrics import default_metrics
from dex_mcp.rate_limiter import PerKeyRateLimiter
from dex_mcp.tools.envelope import extract_bearer_token

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in ("tool", "request_id", "error"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload)


_LOG_LEVEL = getattr(logging, default_config.log_level.upper(), logging.INFO)
if default_config.log_format.lower() == "json":
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=_LOG_LEVEL, handlers=[handler])
else:
    logging.basicConfig(level=_LOG_LEVEL)

rate_limiter = PerKeyRateLimiter(
    rate_per_sec=default_config.rate_limit_qps,
    per_tool=default_config.per_tool_rate_limits,
)
HEALTH_STATUS = {"status": "ok"}
APP_VERSION = "0.1.0"
MCP_SERVER_NAME = "dex-mcp-server"
MCP_SERVER_VERSION = APP_VERSION
RESOURCE_RATE_KEY = "resources/read"
# Metrics key for resources/read calls whose URI matches no template.
UNMATCHED_RESOURCE_KEY = "unmatched"


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    await default_client.aclose()


app = FastAPI(
    title="DEX MCP Server",
    description="MCP tool, resource, and prompt surface over the DEX REST API.",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.time()
    default_metrics.incr_request()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    default_metrics.record_duration(request_id, duration_ms)
    response.headers["X-Request-ID"] = request_id
    return response


def _log_call(kind: str, name: str, result: Any, request_id: Optional[str] = None) -> None:
    """Log and count one tool/resource/prompt outcome."""
    success = not (isinstance(result, dict) and result.get("success") is False)
    if success:
        logger.info(
            "%s=%s outcome=success request_id=%s",
            kind,
            name,
            request_id,
            extra={"tool": name, "request_id": request_id},
        )
    else:
        logger.warning(
            "%s=%s outcome=error error=%s request_id=%s",
            kind,
            name,
            result.get("error"),
            request_id,
            extra={"tool": name, "request_id": request_id, "error": result.get("error")},
        )
    default_metrics.record_call(kind, name, success=success)


async def _enforce_rate_limit(key: str) -> Optional[JSONResponse]:
    allowed = await rate_limiter.allow(key)
    if not allowed:
        logger.warning("tool=%s outcome=rate_limited", key, extra={"tool": key})
        default_metrics.incr_rate_limited()
        return JSONResponse(
            status_code=429,
            content={"jsonrpc": "2.0", "error": {"code": 429, "message": "Rate limit exceeded"}},
        )
    return None


def _access_token(request: Request) -> Optional[str]:
    return extract_bearer_token(request.headers.get("authorization"))


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for monitoring."""
    return JSONResponse(content=HEALTH_STATUS)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Return in-process metrics snapshot."""
    return JSONResponse(content=default_metrics.snapshot())


@app.post("/tools/{tool_name}")
async def tool_route(tool_name: str, request: Request) -> JSONResponse:
    """Call a tool with a JSON object of arguments and return its raw envelope."""
    if tool_name not in mcp.TOOL_REGISTRY:
        return JSONResponse(status_code=404, content={"detail": f"Unknown tool: {tool_name}"})
    limited = await _enforce_rate_limit(tool_name)
    if limited:
        return limited
    try:
        body = await request.json()
    except Exception:
        body = {}
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return JSONResponse(status_code=400, content={"detail": "Request body must be a JSON object"})
    result = await mcp.call_tool(tool_name, body, access_token=_access_token(request))
    request_id = getattr(request.state, "request_id", None)
    _log_call("tool", tool_name, result, request_id)
    return JSONResponse(content=result)


@app.post("/mcp")
async def mcp_gateway(request: Request) -> JSONResponse:
    """
    Minimal JSON-RPC gateway for MCP clients.

    Supported methods:
      - initialize / notifications/initialized
      - tools/list, tools/call (aliases list_tools, call_tool)
      - resources/templates/list, resources/list, resources/read
      - prompts/list, prompts/get
    """
    request_id = getattr(request.state, "request_id", None)
    start_time = time.time()
    access_token = _access_token(request)

    def _respond(
        payload: Dict[str, Any],
        status_code: int = 200,
        *,
        outcome: str,
        method_label: Optional[str] = None,
        tool_label: Optional[str] = None,
        error_code: Optional[int] = None,
    ) -> JSONResponse:
        duration_ms = (time.time() - start_time) * 1000
        logger.debug(
            "mcp outcome=%s method=%s tool=%s id=%s status=%s duration_ms=%.2f error_code=%s",
            outcome,
            method_label,
            tool_label,
            payload.get("id"),
            status_code,
            duration_ms,
            error_code,
            extra={"request_id": request_id, "tool": tool_label, "error": error_code},
        )
        return JSONResponse(status_code=status_code, content=payload)

    def _error(rpc_id: Any, code: int, message: str, *, method_label: Optional[str], status_code: int = 200, tool_label: Optional[str] = None) -> JSONResponse:
        payload = _jsonrpc_error_payload(rpc_id, code, message)
        return _respond(
            payload,
            status_code=status_code,
            outcome="error",
            method_label=method_label,
            tool_label=tool_label,
            error_code=code,
        )

    def _success(rpc_id: Any, result: Any, *, method_label: str, tool_label: Optional[str] = None) -> JSONResponse:
        return _respond(
            _jsonrpc_success_payload(rpc_id, result),
            outcome="success",
            method_label=method_label,
            tool_label=tool_label,
        )

    try:
        body = await request.json()
    except Exception:
        return _error(None, -32700, "Parse error", method_label=None, status_code=400)

    if not isinstance(body, dict):
        return _error(None, -32600, "Invalid request", method_label=None, status_code=400)

    method = body.get("method")
    rpc_id = body.get("id")
    raw_params = body.get("params")
    if raw_params is None:
        params: Dict[str, Any] = {}
    elif isinstance(raw_params, dict):
        params = raw_params
    else:
        return _error(rpc_id, -32602, "Invalid params", method_label=method)

    if not method:
        return _error(rpc_id, -32600, "Invalid request", method_label=None)

    if method == "initialize":
        protocol_version = params.get("protocolVersion")
        if not isinstance(protocol_version, str) or not protocol_version:
            return _error(rpc_id, -32602, "Invalid params", method_label=method)
        logger.debug(
            "mcp initialize requested protocol=%s request_id=%s",
            protocol_version,
            request_id,
            extra={"request_id": request_id},
        )
        result = {
            "protocolVersion": protocol_version,
            "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
            "capabilities": {
                "tools": {"listChanged": False},
                "resources": {"listChanged": False},
                "prompts": {"listChanged": False},
            },
        }
        return _success(rpc_id, result, method_label=method)

    if method in ("notifications/initialized", "initialized"):
        # Notifications get no JSON-RPC body.
        logger.debug(
            "mcp initialized notification received request_id=%s",
            request_id,
            extra={"request_id": request_id},
        )
        return Response(status_code=204)

    if method in ("list_tools", "tools/list"):
        limited = await _enforce_rate_limit("list_tools")
        if limited:
            return limited
        return _success(rpc_id, {"tools": mcp.list_tools()}, method_label=method)

    if method in ("call_tool", "tools/call"):
        tool_name = params.get("tool") or params.get("name")
        tool_params = params.get("params")
        if tool_params is None:
            tool_params = params.get("arguments") or {}
        if not isinstance(tool_name, str) or not tool_name.strip():
            return _error(rpc_id, -32602, "Invalid params", method_label=method)
        if not isinstance(tool_params, dict):
            return _error(rpc_id, -32602, "Invalid params", method_label=method, tool_label=tool_name)
        limited = await _enforce_rate_limit(tool_name)
        if limited:
            return limited
        result = await mcp.call_tool(tool_name, tool_params, access_token=access_token)
        _log_call("tool", tool_name, result, request_id)
        return _success(rpc_id, _wrap_tool_result(result), method_label=method, tool_label=tool_name)

    if method == "resources/templates/list":
        return _success(rpc_id, {"resourceTemplates": mcp.list_resource_templates()}, method_label=method)

    if method == "resources/list":
        return _success(rpc_id, {"resources": mcp.list_resources()}, method_label=method)

    if method == "resources/read":
        uri = params.get("uri")
        if not isinstance(uri, str) or not uri.strip():
            return _error(rpc_id, -32602, "Invalid params", method_label=method)
        limited = await _enforce_rate_limit(RESOURCE_RATE_KEY)
        if limited:
            return limited
        matched = mcp.match_resource(uri)
        metrics_key = matched[0].name if matched else UNMATCHED_RESOURCE_KEY
        result = await mcp.read_resource(uri, access_token=access_token)
        if result is None:
            default_metrics.record_call("resource", metrics_key, success=False)
            return _error(rpc_id, -32002, f"Resource not found: {uri}", method_label=method)
        envelope = json.loads(result["contents"][0]["text"])
        _log_call("resource", metrics_key, envelope, request_id)
        return _success(rpc_id, result, method_label=method)

    if method == "prompts/list":
        return _success(rpc_id, {"prompts": mcp.list_prompts()}, method_label=method)

    if method == "prompts/get":
        name = params.get("name")
        arguments = params.get("arguments") or {}
        if not isinstance(name, str) or not name.strip() or not isinstance(arguments, dict):
            return _error(rpc_id, -32602, "Invalid params", method_label=method)
        try:
            result = mcp.get_prompt(name, arguments)
        except mcp.PromptArgumentError as exc:
            default_metrics.record_call("prompt", name, success=False)
            return _error(rpc_id, -32602, str(exc), method_label=method, tool_label=name)
        if result is None:
            default_metrics.record_call("prompt", name, success=False)
            return _error(rpc_id, -32002, f"Prompt not found: {name}", method_label=method, tool_label=name)
        _log_call("prompt", name, result, request_id)
        return _success(rpc_id, result, method_label=method, tool_label=name)

    return _error(rpc_id, -32601, "Method not found", method_label=method)


def _jsonrpc_success_payload(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def _jsonrpc_error_payload(rpc_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


def _wrap_tool_result(result: Any) -> Dict[str, Any]:
    """
    Shape tool envelopes into an MCP content array.

    Failed envelopes are returned in-band with ``isError`` set and the error
    label as the text content.
    """
    if isinstance(result, dict) and result.get("success") is False:
        message = result.get("error") or "Error"
        return {
            "content": [{"type": "text", "text": str(message)}],
            "isError": True,
            "structuredContent": result,
        }

    try:
        text_repr = json.dumps(result, ensure_ascii=True)
    except (TypeError, ValueError):
        text_repr = str(result)
    return {
        "content": [{"type": "text", "text": text_repr}],
        "structuredContent": result,
    }


def main() -> None:
    uvicorn.run("dex_mcp.server:app", host=default_config.host, port=default_config.port)


if __name__ == "__main__":
    main()
