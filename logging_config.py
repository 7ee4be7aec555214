"""
Structured logging configuration using structlog.

Console output for development, JSON lines everywhere else.
"""
import logging
import os
import sys

import structlog
from structlog.types import Processor


def configure_logging() -> None:
     """Configure structlog and the stdlib root logger."""
     environment = os.getenv("APP_ENV", "development")
     level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

     shared_processors: list[Processor] = [
          structlog.contextvars.merge_contextvars,
          structlog.stdlib.add_log_level,
          structlog.stdlib.add_logger_name,
          structlog.stdlib.PositionalArgumentsFormatter(),
          structlog.processors.TimeStamper(fmt="iso"),
          structlog.processors.StackInfoRenderer(),
          structlog.processors.UnicodeDecoder(),
     ]

     if environment == "development":
          processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=False)]
     else:
          processors = shared_processors + [
               structlog.processors.format_exc_info,
               structlog.processors.JSONRenderer(),
          ]

     structlog.configure(
          processors=processors,
          wrapper_class=structlog.stdlib.BoundLogger,
          context_class=dict,
          logger_factory=structlog.stdlib.LoggerFactory(),
          cache_logger_on_first_use=True,
     )

     logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
     """Get a structured logger bound to a module name."""
     return structlog.get_logger(name)
