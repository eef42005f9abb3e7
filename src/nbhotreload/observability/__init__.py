"""Observability: structured logging, metrics hooks, and the reload channel."""

from __future__ import annotations

from .channel import CHANNEL_NAME, ReloadChannel
from .logger import DocumentLogger, StructuredFormatter, document_logger, get_logger
from .metrics import (
    CELLS_REPLACED_TOTAL,
    METRIC_NAMES,
    POLLS_TOTAL,
    RELOAD_DURATION_MS,
    RELOADS_TOTAL,
    WATCHED_DOCUMENTS,
    CountingMetricsHook,
    MetricsHook,
    NoopMetricsHook,
    resolve_metrics,
)

__all__ = [
    "CELLS_REPLACED_TOTAL",
    "CHANNEL_NAME",
    "METRIC_NAMES",
    "POLLS_TOTAL",
    "RELOADS_TOTAL",
    "RELOAD_DURATION_MS",
    "WATCHED_DOCUMENTS",
    "CountingMetricsHook",
    "DocumentLogger",
    "MetricsHook",
    "NoopMetricsHook",
    "ReloadChannel",
    "StructuredFormatter",
    "document_logger",
    "get_logger",
    "resolve_metrics",
]
