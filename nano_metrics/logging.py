"""
Structured logging configuration for nano-metrics.
"""

import sys
import structlog
import logging
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

# Process-wide reporter identity; written at startup, read from every thread
_reporter_context: Mapping[str, str] = MappingProxyType({})


def configure_logging(log_level: str = "info") -> None:
    """Configure structured logging for the host process."""

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_reporter_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def add_reporter_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add game and server type to log events."""
    for key, value in _reporter_context.items():
        event_dict.setdefault(key, value)

    return event_dict


def set_reporter_context(game: Optional[str] = None, server_type: Optional[str] = None):
    """Set the reporter identity added to every log event, in every thread."""
    global _reporter_context
    context = {}
    if game:
        context["game"] = game
    if server_type:
        context["serverType"] = server_type
    _reporter_context = MappingProxyType(context)


def clear_context():
    """Clear the reporter identity."""
    global _reporter_context
    _reporter_context = MappingProxyType({})


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
