"""
Resource Fetcher - List every page of one resource kind.

The SDK proxies page lazily: each ``next`` link (or marker) is followed as
the generator is consumed. This module wraps that iteration so that any
transport or decode failure surfaces as a FetchError for the kind.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional

from keystoneauth1 import exceptions as ksa_exceptions
from openstack import exceptions as sdk_exceptions

from osstatus.core.schema import ResourceKind, ResourceRecord
from osstatus.openstack.errors import FetchError
from osstatus.openstack.session import Session

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class KindSpec:
    """How to list one resource kind and where its status lives."""

    kind: ResourceKind
    service: str
    list_method: str
    status_attr: str
    filters: Dict[str, Any] = field(default_factory=dict)
    help: str = ""


KIND_SPECS: Dict[ResourceKind, KindSpec] = {
    ResourceKind.ROUTER: KindSpec(
        kind=ResourceKind.ROUTER,
        service="network",
        list_method="routers",
        status_attr="status",
        help="Status of OpenStack Routers",
    ),
    ResourceKind.VOLUME: KindSpec(
        kind=ResourceKind.VOLUME,
        service="block_storage",
        list_method="volumes",
        status_attr="status",
        filters={"details": True, "all_projects": True},
        help="Status of OpenStack Volumes",
    ),
    ResourceKind.SERVER: KindSpec(
        kind=ResourceKind.SERVER,
        service="compute",
        list_method="servers",
        status_attr="status",
        filters={"details": True, "all_projects": True},
        help="Status of OpenStack Servers",
    ),
    # Load balancers report lifecycle in provisioning_status, not status
    ResourceKind.LOAD_BALANCER: KindSpec(
        kind=ResourceKind.LOAD_BALANCER,
        service="load_balancer",
        list_method="load_balancers",
        status_attr="provisioning_status",
        help="Status of OpenStack Load Balancers",
    ),
}

_FETCH_ERRORS = (
    sdk_exceptions.SDKException,
    ksa_exceptions.ClientException,
    ValueError,
    KeyError,
    TypeError,
)


class ResourceFetcher:
    """List resources of one kind across all pages."""

    def __init__(self, specs: Optional[Mapping[ResourceKind, KindSpec]] = None):
        self._specs = dict(specs or KIND_SPECS)

    def spec(self, kind: ResourceKind) -> KindSpec:
        try:
            return self._specs[kind]
        except KeyError:
            raise FetchError(str(kind), "no listing registered for this kind") from None

    def list(
        self,
        session: Session,
        kind: ResourceKind,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        deadline: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Iterator[ResourceRecord]:
        """
        Yield every resource of ``kind``.

        The generator is single-use. Records with an id already seen in this
        listing are skipped so a page boundary shifting under concurrent
        changes cannot count a resource twice.

        Args:
            session: Authenticated session for this pass
            kind: Resource kind to list
            filters: Extra list filters, merged over the kind's defaults
            deadline: ``time.monotonic()`` value after which listing stops
            cancel: Event that stops the listing once set

        Raises:
            FetchError: on the first request or decode failure, or when the
                deadline passes or ``cancel`` is set between records
        """
        spec = self.spec(kind)
        query = {**spec.filters, **(filters or {})}
        seen: set[str] = set()

        try:
            proxy = session.service(spec.service)
            listing = getattr(proxy, spec.list_method)(**query)
            for resource in listing:
                if _expired(deadline, cancel):
                    raise FetchError(str(kind), f"deadline exceeded after {len(seen)} records")
                record = self._to_record(spec, resource)
                if record.id in seen:
                    log.debug("Skipping duplicate %s %s", kind, record.id)
                    continue
                seen.add(record.id)
                yield record
        except _FETCH_ERRORS as e:
            raise FetchError(str(kind), f"listing failed after {len(seen)} records: {e}") from e

        log.debug("Listed %d %s resources", len(seen), kind)

    def _to_record(self, spec: KindSpec, resource: Any) -> ResourceRecord:
        status = _field(resource, spec.status_attr)
        resource_id = _field(resource, "id")
        if not resource_id:
            raise ValueError(f"{spec.kind} resource without an id")
        return ResourceRecord(
            kind=spec.kind,
            id=str(resource_id),
            status="" if status is None else str(status),
        )


def _expired(deadline: Optional[float], cancel: Optional[threading.Event]) -> bool:
    if cancel is not None and cancel.is_set():
        return True
    return deadline is not None and time.monotonic() >= deadline


def _field(resource: Any, name: str) -> Any:
    # SDK resources support attribute access; plain dicts come from raw responses
    if isinstance(resource, Mapping):
        return resource.get(name)
    return getattr(resource, name, None)
