"""Unit tests for the paginated resource fetcher."""

from __future__ import annotations

import threading
import time
from unittest.mock import MagicMock

import pytest
from keystoneauth1 import exceptions as ksa_exceptions
from openstack import exceptions as sdk_exceptions

from osstatus.core.schema import ResourceKind
from osstatus.openstack.errors import FetchError
from osstatus.openstack.fetcher import KIND_SPECS, KindSpec, ResourceFetcher
from osstatus.openstack.session import Session
from tests.fixtures import load_balancer, make_connection, paged, resource


def _session(conn) -> Session:
    return Session(connection=conn, region="RegionOne")


class TestKindSpecs:
    def test_every_kind_registered(self):
        assert set(KIND_SPECS) == set(ResourceKind)

    def test_load_balancers_use_provisioning_status(self):
        assert KIND_SPECS[ResourceKind.LOAD_BALANCER].status_attr == "provisioning_status"
        assert KIND_SPECS[ResourceKind.ROUTER].status_attr == "status"

    def test_volumes_and_servers_list_all_projects(self):
        for kind in (ResourceKind.VOLUME, ResourceKind.SERVER):
            assert KIND_SPECS[kind].filters["all_projects"] is True


class TestResourceFetcherList:
    def test_routers_single_page(self):
        conn = make_connection(
            routers=paged([resource("r1", "ACTIVE"), resource("r2", "DOWN")])
        )
        records = list(ResourceFetcher().list(_session(conn), ResourceKind.ROUTER))

        assert [(r.id, r.status) for r in records] == [("r1", "ACTIVE"), ("r2", "DOWN")]
        assert all(r.kind is ResourceKind.ROUTER for r in records)
        conn.network.routers.assert_called_once_with()

    def test_follows_every_page(self):
        conn = make_connection(
            volumes=paged(
                [resource("v1", "available"), resource("v2", "in-use")],
                [resource("v3", "available")],
                [resource("v4", "error")],
            )
        )
        records = list(ResourceFetcher().list(_session(conn), ResourceKind.VOLUME))
        assert [r.id for r in records] == ["v1", "v2", "v3", "v4"]

    def test_volume_filters_applied(self):
        conn = make_connection()
        list(ResourceFetcher().list(_session(conn), ResourceKind.VOLUME))
        conn.block_storage.volumes.assert_called_once_with(details=True, all_projects=True)

    def test_server_filters_applied(self):
        conn = make_connection()
        list(ResourceFetcher().list(_session(conn), ResourceKind.SERVER))
        conn.compute.servers.assert_called_once_with(details=True, all_projects=True)

    def test_extra_filters_merged_over_defaults(self):
        conn = make_connection()
        list(
            ResourceFetcher().list(
                _session(conn), ResourceKind.VOLUME, {"all_projects": False, "limit": 50}
            )
        )
        conn.block_storage.volumes.assert_called_once_with(
            details=True, all_projects=False, limit=50
        )

    def test_filters_identical_across_passes(self):
        conn = make_connection()
        fetcher = ResourceFetcher()
        list(fetcher.list(_session(conn), ResourceKind.SERVER))
        list(fetcher.list(_session(conn), ResourceKind.SERVER))
        first, second = conn.compute.servers.call_args_list
        assert first == second

    def test_load_balancer_status_from_provisioning_status(self):
        conn = make_connection(
            load_balancers=paged([load_balancer("lb1", "ACTIVE"), load_balancer("lb2", "PENDING_UPDATE")])
        )
        records = list(ResourceFetcher().list(_session(conn), ResourceKind.LOAD_BALANCER))
        assert [r.status for r in records] == ["ACTIVE", "PENDING_UPDATE"]

    def test_unset_status_becomes_empty_string(self):
        conn = make_connection(load_balancers=paged([load_balancer("lb1", None)]))
        records = list(ResourceFetcher().list(_session(conn), ResourceKind.LOAD_BALANCER))
        assert records[0].status == ""

    def test_dict_resources_supported(self):
        conn = make_connection(routers=paged([{"id": "r1", "status": "ACTIVE"}]))
        records = list(ResourceFetcher().list(_session(conn), ResourceKind.ROUTER))
        assert records[0].id == "r1"
        assert records[0].status == "ACTIVE"

    def test_duplicate_ids_across_pages_counted_once(self):
        conn = make_connection(
            routers=paged(
                [resource("r1", "ACTIVE"), resource("r2", "ACTIVE")],
                [resource("r2", "ACTIVE"), resource("r3", "DOWN")],
            )
        )
        records = list(ResourceFetcher().list(_session(conn), ResourceKind.ROUTER))
        assert [r.id for r in records] == ["r1", "r2", "r3"]

    def test_listing_is_lazy(self):
        conn = make_connection()
        ResourceFetcher().list(_session(conn), ResourceKind.ROUTER)
        conn.network.routers.assert_not_called()


class TestResourceFetcherErrors:
    def test_page_failure_raises_fetch_error(self):
        cause = sdk_exceptions.HttpException(message="bad gateway")
        conn = make_connection(
            volumes=paged([resource("v1", "available")], error=cause)
        )

        with pytest.raises(FetchError) as exc:
            list(ResourceFetcher().list(_session(conn), ResourceKind.VOLUME))

        assert exc.value.kind == "volume"
        assert exc.value.__cause__ is cause

    def test_records_before_failure_are_yielded_first(self):
        conn = make_connection(
            volumes=paged([resource("v1", "available")], error=ValueError("decode"))
        )
        listing = ResourceFetcher().list(_session(conn), ResourceKind.VOLUME)

        assert next(listing).id == "v1"
        with pytest.raises(FetchError, match="decode"):
            next(listing)

    def test_transport_error_wrapped(self):
        conn = make_connection(
            routers=paged(error=ksa_exceptions.ConnectFailure("connection refused"))
        )
        with pytest.raises(FetchError, match="connection refused"):
            list(ResourceFetcher().list(_session(conn), ResourceKind.ROUTER))

    def test_missing_service_wrapped(self):
        conn = make_connection()
        conn.load_balancer.load_balancers.side_effect = sdk_exceptions.EndpointNotFound(
            "load-balancer endpoint not found"
        )
        with pytest.raises(FetchError, match="load-balancer endpoint not found"):
            list(ResourceFetcher().list(_session(conn), ResourceKind.LOAD_BALANCER))

    def test_resource_without_id_fails(self):
        conn = make_connection(routers=paged([{"status": "ACTIVE"}]))
        with pytest.raises(FetchError, match="without an id"):
            list(ResourceFetcher().list(_session(conn), ResourceKind.ROUTER))

    def test_unregistered_kind(self):
        fetcher = ResourceFetcher(
            {ResourceKind.ROUTER: KindSpec(ResourceKind.ROUTER, "network", "routers", "status")}
        )
        with pytest.raises(FetchError, match="no listing registered"):
            list(fetcher.list(_session(MagicMock()), ResourceKind.VOLUME))


class TestResourceFetcherDeadline:
    def test_cancel_stops_listing_between_records(self):
        cancel = threading.Event()
        conn = make_connection(
            routers=paged([resource("r1", "ACTIVE")], [resource("r2", "ACTIVE")])
        )
        listing = ResourceFetcher().list(_session(conn), ResourceKind.ROUTER, cancel=cancel)

        assert next(listing).id == "r1"
        cancel.set()
        with pytest.raises(FetchError, match="deadline exceeded after 1 records") as exc:
            next(listing)
        assert exc.value.kind == "router"

    def test_expired_deadline_fails_listing(self):
        conn = make_connection(volumes=paged([resource("v1", "available")]))

        with pytest.raises(FetchError, match="deadline exceeded"):
            list(
                ResourceFetcher().list(
                    _session(conn), ResourceKind.VOLUME, deadline=time.monotonic() - 1
                )
            )

    def test_future_deadline_lists_everything(self):
        conn = make_connection(
            routers=paged([resource("r1", "ACTIVE")], [resource("r2", "DOWN")])
        )
        records = list(
            ResourceFetcher().list(
                _session(conn),
                ResourceKind.ROUTER,
                deadline=time.monotonic() + 60,
                cancel=threading.Event(),
            )
        )

        assert [r.id for r in records] == ["r1", "r2"]
