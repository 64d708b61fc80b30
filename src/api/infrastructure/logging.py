"""Structlog configuration for the catalog service.

Console output with colors for development, JSON lines for production.
Every event carries the service name so logs from several deployments can
share one sink.
"""

import logging
import os
import sys

import structlog

# Storage uploads and JWKS fetches go through httpx, which logs every
# request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore")


def use_colored_output() -> bool:
    """Colors on a TTY, or anywhere when FORCE_COLOR is set (e.g. Docker)."""
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    return force_color or sys.stdout.isatty()


def add_service_name(app_name: str) -> structlog.types.Processor:
    """Processor stamping every event with the service name."""

    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", app_name)
        return event_dict

    return processor


def configure_logging(level: str = "INFO", app_name: str | None = None) -> None:
    """Configure structlog and the standard library loggers.

    Args:
        level: Minimum level name to emit (e.g. "INFO", "DEBUG").
        app_name: Bound to every event as ``service`` when given.
    """
    min_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if app_name:
        shared_processors.insert(0, add_service_name(app_name))

    if use_colored_output():
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Third-party libraries log through the standard library
    logging.basicConfig(level=min_level, stream=sys.stdout, format="%(message)s")
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(min_level, logging.WARNING))
