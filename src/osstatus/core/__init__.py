"""Core models, configuration and aggregation."""

from osstatus.core.aggregate import aggregate
from osstatus.core.config import ExporterConfig, parse_listen_address
from osstatus.core.schema import (
    DEFAULT_KINDS,
    CollectionResult,
    KindResult,
    ResourceKind,
    ResourceRecord,
    StatusSnapshot,
)

__all__ = [
    "aggregate",
    "ExporterConfig",
    "parse_listen_address",
    "DEFAULT_KINDS",
    "CollectionResult",
    "KindResult",
    "ResourceKind",
    "ResourceRecord",
    "StatusSnapshot",
]
