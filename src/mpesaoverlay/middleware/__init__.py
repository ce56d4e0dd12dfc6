"""Observing wrappers around an ``MpesaSDK``."""

from .base import SDKMiddleware
from .logging import LoggingMiddleware, with_logger
from .metrics import MetricsMiddleware, with_metrics
from .persistence import PersistenceMiddleware, with_persistence
from .tracing import TracingMiddleware, with_tracing

__all__ = [
    "SDKMiddleware",
    "LoggingMiddleware",
    "MetricsMiddleware",
    "PersistenceMiddleware",
    "TracingMiddleware",
    "with_logger",
    "with_metrics",
    "with_persistence",
    "with_tracing",
]
