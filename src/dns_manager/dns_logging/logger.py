"""
Structured Logging

structlog on top of the standard library. Logs always go to stderr, since
stdout belongs to command output, and optionally to a rotating JSON file.
Records from plain ``logging.getLogger(__name__)`` loggers in the codec and
stores pass through the same formatters.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import structlog

from ..config.schema import LoggingConfig

# Applied to stdlib records before rendering, so they carry the same keys
PRE_CHAIN = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
]

_active_config: Optional[LoggingConfig] = None


def _handler(handler: logging.Handler, renderer, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer, foreign_pre_chain=PRE_CHAIN
        )
    )
    return handler


def _file_handler(config: LoggingConfig) -> logging.Handler:
    Path(config.file).parent.mkdir(parents=True, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        filename=config.file,
        maxBytes=config.max_size_mb * 1024 * 1024,
        backupCount=config.backup_count,
        encoding="utf-8",
    )


def setup_logging(config: LoggingConfig) -> None:
    """Install the stderr handler, and the log file when one is configured.

    Calling it again replaces the previous handlers.
    """
    global _active_config

    level = getattr(logging, config.level.upper())
    if config.format == "structured":
        console_renderer = structlog.processors.JSONRenderer()
    else:
        console_renderer = structlog.dev.ConsoleRenderer(colors=False)

    root = logging.getLogger()
    for old in root.handlers:
        old.close()
    root.handlers.clear()
    root.setLevel(level)
    console = logging.StreamHandler(sys.stderr)
    root.addHandler(_handler(console, console_renderer, level))
    if config.file:
        root.addHandler(
            _handler(_file_handler(config), structlog.processors.JSONRenderer(), level)
        )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *PRE_CHAIN,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _active_config = config


def get_logger(name: str = "dns_manager") -> structlog.stdlib.BoundLogger:
    """Structured logger bound to name.

    Raises:
        RuntimeError: If setup_logging() has not run
    """
    if _active_config is None:
        raise RuntimeError("Logging not configured. Call setup_logging() first.")
    return structlog.get_logger(name)


def log_exception(logger, message: str, exc: BaseException) -> None:
    """Log exc at error level with its type, message and rendered traceback"""
    logger.error(
        message,
        exception_type=type(exc).__name__,
        exception_message=str(exc),
        exc_info=exc,
    )
