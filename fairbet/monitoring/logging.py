"""Structured logging configuration using structlog.

This module configures structlog for the odds engine:
- JSON output in production mode (filterable, parseable)
- Colored console output in development mode (human-readable)
- Fetch generation binding so every event of one refresh cycle can be traced

Usage:
    from fairbet.monitoring import configure_logging, get_logger

    # Configure once at startup
    configure_logging("production")  # or "development"

    log = get_logger()
    log.info("page_fetched", offset=500, bet_count=500)
    log.warning("background_page_failed", offset=1000, error=str(e))
"""

import logging
import sys

import structlog


def configure_logging(mode: str = "development") -> None:
    """Configure structlog for the application.

    Args:
        mode: Either "production" (JSON output) or "development" (colored console)
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if mode == "production":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.INFO,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (defaults to caller's module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def bind_fetch_generation(generation: int) -> None:
    """Bind the current fetch generation to the logging context.

    Every refresh starts a new generation. Binding it lets log consumers
    separate events of a cancelled cycle from the one that replaced it.

    Args:
        generation: Monotonic refresh counter of the orchestrator
    """
    structlog.contextvars.bind_contextvars(fetch_generation=generation)


def unbind_fetch_generation() -> None:
    """Remove the fetch generation from the logging context."""
    structlog.contextvars.unbind_contextvars("fetch_generation")
