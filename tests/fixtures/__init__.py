"""Test fixtures for osstatus."""

from tests.fixtures.openstack import (
    load_balancer,
    make_connection,
    make_provider,
    paged,
    resource,
)

__all__ = [
    "load_balancer",
    "make_connection",
    "make_provider",
    "paged",
    "resource",
]
