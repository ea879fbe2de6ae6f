"""Request checks and the success/error envelope shared by every endpoint."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from dex_mcp.tools.validators import SUPPORTED_CHAINS, is_supported_chain, parse_optional_int


class ToolInputError(ValueError):
    """Raised when a caller-supplied argument fails validation."""


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def extract_bearer_token(header: Optional[str]) -> Optional[str]:
    """Return the second whitespace-separated word of an Authorization header."""
    if not header:
        return None
    parts = header.split()
    if len(parts) < 2:
        return None
    return parts[1]


def require_access_token(token: Optional[str]) -> str:
    if not token or not str(token).strip():
        raise ToolInputError("Access token is required. Please provide a valid JWT token.")
    return str(token).strip()


def require_chain(chain: Optional[str]) -> str:
    if not is_supported_chain(chain):
        raise ToolInputError(
            f"Unsupported chain: {chain}. Supported chains: {', '.join(SUPPORTED_CHAINS)}"
        )
    return chain


def require_text(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ToolInputError(f"{label} is required.")
    return value.strip()


def check_limit(value: Any, *, minimum: int = 1, maximum: int = 100) -> Optional[int]:
    """Reject limits outside ``minimum..maximum``; None passes through."""
    if value is None or value == "":
        return None
    parsed = parse_optional_int(value)
    if parsed is None or parsed < minimum or parsed > maximum:
        raise ToolInputError(f"Limit must be between {minimum} and {maximum}")
    return parsed


def require_choice(value: Any, choices: Iterable[str], label: str) -> Optional[str]:
    """Enum membership check; None passes through."""
    if value is None or value == "":
        return None
    allowed = tuple(choices)
    if value not in allowed:
        raise ToolInputError(f"Invalid {label}: {value}. Supported values: {', '.join(allowed)}")
    return value


def success_envelope(**fields: Any) -> Dict[str, Any]:
    return {"success": True, **fields, "timestamp": utc_timestamp()}


def error_envelope(error: str, exc: BaseException, **fields: Any) -> Dict[str, Any]:
    return {
        "success": False,
        "error": error,
        **fields,
        "message": str(exc),
        "timestamp": utc_timestamp(),
    }
