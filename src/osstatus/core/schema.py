"""
Domain models for a collection pass.

A pass produces one CollectionResult: a health flag plus one KindResult per
enabled resource kind. Results are built fresh for every pass and never
mutated after the orchestrator returns them.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# status string -> number of resources currently in that status
StatusSnapshot = Dict[str, int]


class ResourceKind(str, Enum):
    """Categories of OpenStack resources tracked by the exporter."""

    ROUTER = "router"
    VOLUME = "volume"
    SERVER = "server"
    LOAD_BALANCER = "load_balancer"

    def __str__(self) -> str:
        return self.value

    @property
    def subsystem(self) -> str:
        """Metric subsystem name (``openstack_<subsystem>_status_total``)."""
        if self is ResourceKind.LOAD_BALANCER:
            return "lb"
        return self.value


DEFAULT_KINDS = (
    ResourceKind.ROUTER,
    ResourceKind.VOLUME,
    ResourceKind.LOAD_BALANCER,
)


class BaseSchema(BaseModel):
    """Base config shared by domain models."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class ResourceRecord(BaseSchema):
    """One resource returned by a listing call."""

    kind: ResourceKind
    id: str
    status: str = ""


class KindResult(BaseSchema):
    """Outcome of fetching and aggregating one resource kind."""

    kind: ResourceKind
    counts: StatusSnapshot = Field(default_factory=dict)
    ok: bool = True
    error: Optional[str] = None
    record_count: int = 0
    duration_seconds: float = 0.0

    @classmethod
    def failed(
        cls,
        kind: ResourceKind,
        error: str,
        *,
        duration_seconds: float = 0.0,
    ) -> KindResult:
        """A kind that contributes nothing to this pass."""
        return cls(
            kind=kind,
            ok=False,
            error=error,
            duration_seconds=duration_seconds,
        )


class CollectionResult(BaseSchema):
    """Everything one collection pass produced."""

    operational: bool
    results: Dict[ResourceKind, KindResult] = Field(default_factory=dict)
    auth_error: Optional[str] = None
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_seconds: float = 0.0

    def snapshot(self, kind: ResourceKind) -> StatusSnapshot:
        """Status counts for a kind; empty when the kind failed or was not collected."""
        result = self.results.get(kind)
        if result is None or not result.ok:
            return {}
        return dict(result.counts)

    def failed_kinds(self) -> list[ResourceKind]:
        return [kind for kind, result in self.results.items() if not result.ok]
