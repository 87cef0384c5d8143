"""Monitoring module for structured logging and observability.

Provides structlog-based logging:
- Structured JSON logging for production
- Human-readable console output for development
- Fetch generation binding for tracing refresh cycles

Also provides metrics dataclasses for:
- Page fetch progress
- EV cache behaviour
"""

from fairbet.monitoring.logging import (
    bind_fetch_generation,
    configure_logging,
    get_logger,
    unbind_fetch_generation,
)
from fairbet.monitoring.metrics import EVCacheMetrics, FetchMetrics

__all__ = [
    "configure_logging",
    "get_logger",
    "bind_fetch_generation",
    "unbind_fetch_generation",
    "FetchMetrics",
    "EVCacheMetrics",
]
