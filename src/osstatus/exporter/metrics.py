"""
Prometheus translation of collection results.

Metric families are rebuilt from a fresh CollectionResult on every scrape.
A status that no resource holds any more simply stops being exported,
instead of lingering on a long-lived labelled gauge.
"""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Sequence

from prometheus_client.core import GaugeMetricFamily, Metric
from prometheus_client.registry import Collector, CollectorRegistry

from osstatus.core.schema import CollectionResult, ResourceKind
from osstatus.openstack.fetcher import KIND_SPECS
from osstatus.openstack.orchestrator import CollectionOrchestrator

log = logging.getLogger(__name__)

NAMESPACE = "openstack"


def build_metrics(
    result: CollectionResult,
    kinds: Sequence[ResourceKind],
) -> list[Metric]:
    """
    Translate one pass into metric families.

    Args:
        result: Output of a collection pass
        kinds: Kinds enabled for this exporter; each gets a status family
            even when the pass produced no samples for it
    """
    up = GaugeMetricFamily(
        f"{NAMESPACE}_up",
        "OpenStack Status Collection Operational",
        value=1 if result.operational else 0,
    )
    duration = GaugeMetricFamily(
        f"{NAMESPACE}_collection_duration_seconds",
        "Duration of the OpenStack status collection pass",
        value=result.duration_seconds,
    )
    metrics: list[Metric] = [up, duration]

    for kind in kinds:
        subsystem = kind.subsystem
        status = GaugeMetricFamily(
            f"{NAMESPACE}_{subsystem}_status_total",
            KIND_SPECS[kind].help if kind in KIND_SPECS else f"Status of OpenStack {kind}",
            labels=["status"],
        )
        for value, count in sorted(result.snapshot(kind).items()):
            status.add_metric([value], count)
        metrics.append(status)

        kind_result = result.results.get(kind)
        if kind_result is None:
            # Authentication failed, nothing was attempted for this kind
            continue
        metrics.append(
            GaugeMetricFamily(
                f"{NAMESPACE}_{subsystem}_collection_success",
                f"Whether the last {kind} listing succeeded",
                value=1 if kind_result.ok else 0,
            )
        )
        metrics.append(
            GaugeMetricFamily(
                f"{NAMESPACE}_{subsystem}_collection_duration_seconds",
                f"Duration of the last {kind} listing",
                value=kind_result.duration_seconds,
            )
        )

    return metrics


class StatusMetricsCollector(Collector):
    """Custom collector that runs one collection pass per scrape."""

    def __init__(self, orchestrator: CollectionOrchestrator):
        self._orchestrator = orchestrator

    def collect(self) -> Iterator[Metric]:
        result = self._orchestrator.collect()
        if not result.operational:
            log.warning(
                "Scrape degraded: auth_error=%s failed_kinds=%s",
                result.auth_error,
                [str(kind) for kind in result.failed_kinds()],
            )
        yield from build_metrics(result, self._orchestrator.kinds)

    def describe(self) -> Iterable[Metric]:
        # Registering must not trigger a collection pass
        return []


def build_registry(orchestrator: CollectionOrchestrator) -> CollectorRegistry:
    """Registry holding only the status collector (no process/platform metrics)."""
    registry = CollectorRegistry(auto_describe=False)
    registry.register(StatusMetricsCollector(orchestrator))
    return registry
