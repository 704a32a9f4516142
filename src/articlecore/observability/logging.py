"""
structlog setup shared by the library and the CLI.

Both structlog and plain ``logging`` records end up in one stdlib handler:
JSON lines when a log file is configured, the console renderer otherwise.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, List

import structlog

if TYPE_CHECKING:
    from articlecore.config.config import MonitoringConfig


def configure_logging(config: MonitoringConfig) -> None:
    """Install the root handler and configure structlog to render through it."""
    pre_chain: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    renderer: Any
    handler: logging.Handler
    if config.log_file:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
        handler = logging.FileHandler(config.log_file, encoding="utf-8")
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(config.log_level)

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    structlog.get_logger(__name__).debug("logging_configured", level=config.log_level, output=config.log_file or "stderr")
