"""
Session Provider - Authenticate against OpenStack once per collection pass.

Credentials come from the ambient OS_* environment variables or a named
clouds.yaml entry and are re-read on every call. Nothing is cached between
passes since tokens may expire.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import openstack
from keystoneauth1 import exceptions as ksa_exceptions
from openstack import exceptions as sdk_exceptions
from openstack.connection import Connection

from osstatus.openstack.errors import AuthError

log = logging.getLogger(__name__)

# Services every pass needs before any listing is attempted
REQUIRED_SERVICES = (
    ("compute", "compute"),
    ("network", "network"),
    ("block_storage", "block-storage"),
)

_SDK_ERRORS = (sdk_exceptions.SDKException, ksa_exceptions.ClientException)


@dataclass
class Session:
    """
    One authenticated connection exposing per-service proxies.

    All accessors share the connection's token, so a pass authenticates
    exactly once.
    """

    connection: Connection
    region: Optional[str] = None

    @property
    def compute(self) -> Any:
        return self.connection.compute

    @property
    def network(self) -> Any:
        return self.connection.network

    @property
    def block_storage(self) -> Any:
        return self.connection.block_storage

    @property
    def load_balancer(self) -> Any:
        # Resolved lazily; a missing Octavia endpoint only fails that kind
        return self.connection.load_balancer

    def service(self, name: str) -> Any:
        """Look up a service proxy by accessor name."""
        return getattr(self, name)

    def close(self) -> None:
        try:
            self.connection.close()
        except _SDK_ERRORS as e:
            log.debug("Error closing connection: %s", e)


class SessionProvider:
    """
    Build authenticated sessions from ambient configuration.

    Example:
        provider = SessionProvider(region="RegionOne")
        session = provider.authenticate()
        routers = list(session.network.routers())
    """

    def __init__(
        self,
        *,
        cloud: Optional[str] = None,
        region: Optional[str] = None,
        api_timeout: Optional[float] = None,
    ):
        self._cloud = cloud
        self._region = region
        self._api_timeout = api_timeout

    def authenticate(self) -> Session:
        """
        Authenticate and verify the compute, network and block-storage endpoints.

        Returns:
            Session bound to the configured region

        Raises:
            AuthError: credentials are missing or rejected, or a required
                endpoint is not in the service catalog
        """
        kwargs: dict[str, Any] = {}
        if self._region:
            kwargs["region_name"] = self._region
        if self._api_timeout:
            kwargs["api_timeout"] = self._api_timeout

        try:
            connection = openstack.connect(cloud=self._cloud, **kwargs)
        except _SDK_ERRORS as e:
            raise AuthError(
                f"could not get auth options from environment: {e}",
                phase="config",
            ) from e

        try:
            connection.authorize()
        except _SDK_ERRORS as e:
            raise AuthError(f"could not authenticate: {e}") from e

        region = self._region or _connection_region(connection)
        for accessor, service_type in REQUIRED_SERVICES:
            try:
                endpoint = connection.endpoint_for(service_type, region_name=region)
            except _SDK_ERRORS as e:
                raise AuthError(
                    f"could not initialize {accessor} client: {e}",
                    phase=f"endpoint:{accessor}",
                ) from e
            if not endpoint:
                raise AuthError(
                    f"could not initialize {accessor} client: "
                    f"no {service_type} endpoint in region {region or 'default'}",
                    phase=f"endpoint:{accessor}",
                )
            log.debug("Endpoint %s: %s", service_type, endpoint)

        return Session(connection=connection, region=region)

    def endpoints(self, session: Session) -> dict[str, Optional[str]]:
        """Catalog URLs for the required services plus load-balancer (if any)."""
        found: dict[str, Optional[str]] = {}
        services = REQUIRED_SERVICES + (("load_balancer", "load-balancer"),)
        for accessor, service_type in services:
            try:
                found[accessor] = session.connection.endpoint_for(
                    service_type, region_name=session.region
                )
            except _SDK_ERRORS:
                found[accessor] = None
        return found


def _connection_region(connection: Connection) -> Optional[str]:
    config = getattr(connection, "config", None)
    return getattr(config, "region_name", None) or None
