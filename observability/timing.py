"""Timing utilities for report-building steps."""

from __future__ import annotations

import time
from collections.abc import Sequence
from contextlib import contextmanager
from typing import Any, Generator

from .logging_config import get_logger
from .metrics import get_metrics_client

logger = get_logger(__name__)


def facility_tags(facility_names: Sequence[str]) -> dict[str, str]:
    """Metric tags naming the facilities a report step covered."""
    return {
        "facility_count": str(len(facility_names)),
        "facilities": ",".join(sorted(facility_names)),
    }


class TimingContext:
    """Times one report step and reports it tagged with its outcome."""

    def __init__(self, name: str, tags: dict[str, str] | None = None, emit_metric: bool = True):
        self.name = name
        self.tags = dict(tags or {})
        self.emit_metric = emit_metric
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self) -> "TimingContext":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000
        self.tags["outcome"] = "error" if exc_type is not None else "ok"
        logger.debug(
            "Report step finished",
            extra={"step": self.name, "elapsed_ms": round(self.elapsed_ms, 3), **self.tags},
        )
        if self.emit_metric:
            get_metrics_client().timing(self.name, self.elapsed_ms, self.tags)


@contextmanager
def timed(
    name: str, tags: dict[str, str] | None = None, emit_metric: bool = True
) -> Generator[TimingContext, None, None]:
    """Time a block and report it to the installed metrics client.

    A step that raises is still reported, tagged ``outcome=error``.

    Usage:
        with timed("compiled_report.compile", facility_tags(names)) as t:
            rows = compile_report(template, facilities)
    """
    ctx = TimingContext(name, tags, emit_metric)
    with ctx:
        yield ctx
