"""Minimal in-process metrics recorder (not suitable for multi-process aggregation)."""

from __future__ import annotations

from collections import Counter
from threading import Lock
from typing import Dict

MAX_TRACKED_DURATIONS = 200


class MetricsRecorder:
    def __init__(self) -> None:
        self._lock = Lock()
        self._requests = 0
        self._request_durations_ms: Dict[str, float] = {}
        self._rate_limited = 0
        self._success: Dict[str, Counter[str]] = {}
        self._error: Dict[str, Counter[str]] = {}

    def incr_request(self) -> None:
        with self._lock:
            self._requests += 1

    def record_duration(self, request_id: str, duration_ms: float) -> None:
        with self._lock:
            self._request_durations_ms[request_id] = duration_ms
            while len(self._request_durations_ms) > MAX_TRACKED_DURATIONS:
                # dicts keep insertion order, so the first key is the oldest
                oldest = next(iter(self._request_durations_ms))
                del self._request_durations_ms[oldest]

    def incr_rate_limited(self) -> None:
        with self._lock:
            self._rate_limited += 1

    def record_call(self, kind: str, name: str, *, success: bool) -> None:
        """Count a tool, resource, or prompt outcome under ``kind``."""
        with self._lock:
            bucket = self._success if success else self._error
            bucket.setdefault(kind, Counter())[name] += 1

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            return {
                "requests": self._requests,
                "rate_limited": self._rate_limited,
                "tool_success": dict(self._success.get("tool", {})),
                "tool_error": dict(self._error.get("tool", {})),
                "resource_success": dict(self._success.get("resource", {})),
                "resource_error": dict(self._error.get("resource", {})),
                "prompt_success": dict(self._success.get("prompt", {})),
                "prompt_error": dict(self._error.get("prompt", {})),
                "recent_request_durations_ms": dict(self._request_durations_ms),
            }

    def reset(self) -> None:
        with self._lock:
            self._requests = 0
            self._request_durations_ms.clear()
            self._rate_limited = 0
            self._success.clear()
            self._error.clear()


default_metrics = MetricsRecorder()
