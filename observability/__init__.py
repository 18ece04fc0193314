# Observability module
from .metrics import MetricsClient, NullMetricsClient, StdoutMetricsClient, get_metrics_client, set_metrics_client
from .logging_config import configure_logging, get_logger
from .timing import facility_tags, timed, TimingContext

__all__ = [
    "MetricsClient",
    "NullMetricsClient",
    "StdoutMetricsClient",
    "get_metrics_client",
    "set_metrics_client",
    "configure_logging",
    "get_logger",
    "facility_tags",
    "timed",
    "TimingContext",
]
