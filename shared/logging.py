"""
Shared logging configuration for fetch-cache.
"""

import sys
import structlog
import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional
from contextvars import ContextVar

# Context variables for the cached fetch currently in flight
namespace_var: ContextVar[Optional[str]] = ContextVar('cache_namespace', default=None)
cache_key_var: ContextVar[Optional[str]] = ContextVar('cache_key', default=None)
strategy_var: ContextVar[Optional[str]] = ContextVar('cache_strategy', default=None)


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured logging for a service."""

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
            add_service_context,
            add_fetch_context,
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
    logging.getLogger(service_name).setLevel(getattr(logging, log_level.upper()))


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to log events."""
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        event_dict["service"] = logger_name.split(".")[0]

    return event_dict


def add_fetch_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the in-flight cached fetch to log events."""
    namespace = namespace_var.get()
    if namespace:
        event_dict.setdefault("cache_namespace", namespace)

    key = cache_key_var.get()
    if key:
        event_dict.setdefault("cache_key", key)

    strategy = strategy_var.get()
    if strategy:
        event_dict.setdefault("cache_strategy", strategy)

    return event_dict


@contextmanager
def fetch_context(namespace: Optional[str] = None, key: Optional[str] = None,
                  strategy: Optional[str] = None):
    """Bind cached fetch context for logging while the block runs.

    Tasks created inside the block keep the context; the caller's own
    values are restored on exit.
    """
    tokens = []
    if namespace:
        tokens.append((namespace_var, namespace_var.set(namespace)))
    if key:
        tokens.append((cache_key_var, cache_key_var.set(key)))
    if strategy:
        tokens.append((strategy_var, strategy_var.set(strategy)))
    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
