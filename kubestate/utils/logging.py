"""
structlog configuration for the exporter.

Every record, including those from uvicorn and the kubernetes client, goes
through one stdlib handler on stdout and is rendered as JSON lines or as
colored console output. Context bound with
``structlog.contextvars.bound_contextvars`` (the watch loops bind ``shard``)
is merged into each line.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from config.settings import AppSettings, get_settings

# Third-party loggers that only log above WARNING
NOISY_LOGGERS = ("uvicorn.access", "kubernetes", "urllib3")


def renderer_for(log_format: str) -> Processor:
    """Final processor for ``json`` or ``console`` output."""
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    raise ValueError(f"Unknown log format {log_format!r}")


def setup_logging(settings: AppSettings | None = None) -> None:
    """Route structlog and stdlib logging through one stdout handler."""
    settings = settings or get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    renderer = renderer_for(settings.log_format)
    if settings.log_format == "json":
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(logging.DEBUG if settings.debug else settings.log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
