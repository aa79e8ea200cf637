"""OpenStack session, listing and collection orchestration."""

from osstatus.openstack.errors import AuthError, FetchError, OpenStackStatusError
from osstatus.openstack.fetcher import KIND_SPECS, KindSpec, ResourceFetcher
from osstatus.openstack.orchestrator import CollectionOrchestrator
from osstatus.openstack.session import Session, SessionProvider

__all__ = [
    "AuthError",
    "FetchError",
    "OpenStackStatusError",
    "KIND_SPECS",
    "KindSpec",
    "ResourceFetcher",
    "CollectionOrchestrator",
    "Session",
    "SessionProvider",
]
