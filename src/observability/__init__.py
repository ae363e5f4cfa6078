"""Logging setup and metrics of the bind engine."""

from src.observability.logging import configure_logging, request_context
from src.observability.metrics import BindMetrics


__all__ = [
    "BindMetrics",
    "configure_logging",
    "request_context",
]
