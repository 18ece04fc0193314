"""Metrics client abstraction.

Report building emits a handful of counters and timings through whatever
client is installed. The default is a no-op; switch to stdout JSON with:

    from observability.metrics import set_metrics_client, StdoutMetricsClient
    set_metrics_client(StdoutMetricsClient())
"""

from __future__ import annotations

import json
import sys
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any


class MetricsClient(ABC):
    """Abstract base class for metrics emission."""

    @abstractmethod
    def incr(self, name: str, tags: dict[str, str] | None = None, value: int = 1) -> None:
        """Increment a counter metric."""
        ...

    @abstractmethod
    def timing(self, name: str, value_ms: float, tags: dict[str, str] | None = None) -> None:
        """Record a timing value in milliseconds."""
        ...


class StdoutMetricsClient(MetricsClient):
    """Emit metrics as JSON lines on stderr for development/debugging."""

    def __init__(self, prefix: str = "execution_reports"):
        self.prefix = prefix

    def _emit(self, metric_type: str, name: str, value: Any, tags: dict[str, str] | None) -> None:
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "type": metric_type,
            "metric": f"{self.prefix}.{name}",
            "value": value,
            "tags": tags or {},
        }
        print(json.dumps(record), file=sys.stderr)

    def incr(self, name: str, tags: dict[str, str] | None = None, value: int = 1) -> None:
        self._emit("counter", name, value, tags)

    def timing(self, name: str, value_ms: float, tags: dict[str, str] | None = None) -> None:
        self._emit("timing", name, value_ms, tags)


class NullMetricsClient(MetricsClient):
    """No-op metrics client for when metrics are disabled."""

    def incr(self, name: str, tags: dict[str, str] | None = None, value: int = 1) -> None:
        pass

    def timing(self, name: str, value_ms: float, tags: dict[str, str] | None = None) -> None:
        pass


_client: MetricsClient = NullMetricsClient()
_client_lock = threading.Lock()


def get_metrics_client() -> MetricsClient:
    return _client


def set_metrics_client(client: MetricsClient) -> None:
    global _client
    with _client_lock:
        _client = client
