"""Structured logging configuration for mediaprep."""

import logging
import sys
from pathlib import Path
from typing import Optional

import structlog

from mediaprep.config import LoggingConfig


def setup_logging(config: LoggingConfig) -> None:
    """Configure structured logging.

    Args:
        config: Logging configuration
    """
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if config.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, config.level.upper())

    # Logs go to stderr; stdout is reserved for command output (`plan`)
    handlers = []
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    if config.output:
        log_path = Path(config.output).expanduser()
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
            file_handler.setLevel(level)
            handlers.append(file_handler)
        except OSError as e:
            print(f"Warning: Could not create log file {log_path}: {e}", file=sys.stderr)

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=handlers,
        force=True,
    )

    # Request URLs carry the TMDB api_key
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance.

    Args:
        name: Logger name (defaults to caller's module name)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)
