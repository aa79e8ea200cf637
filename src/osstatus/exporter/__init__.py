"""Prometheus exposition and HTTP serving."""

from osstatus.exporter.metrics import StatusMetricsCollector, build_metrics, build_registry
from osstatus.exporter.server import build_app, create_server, serve

__all__ = [
    "StatusMetricsCollector",
    "build_metrics",
    "build_registry",
    "build_app",
    "create_server",
    "serve",
]
