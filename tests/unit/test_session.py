"""Unit tests for the OpenStack Session Provider."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from keystoneauth1 import exceptions as ksa_exceptions
from openstack import exceptions as sdk_exceptions

from osstatus.openstack.errors import AuthError
from osstatus.openstack.session import Session, SessionProvider


def _connection(missing: tuple[str, ...] = ()) -> MagicMock:
    conn = MagicMock()
    conn.config.region_name = "RegionOne"

    def endpoint_for(service_type, **kwargs):
        if service_type in missing:
            return None
        return f"https://{service_type}.example.com/v2"

    conn.endpoint_for.side_effect = endpoint_for
    return conn


class TestAuthenticate:
    @patch("osstatus.openstack.session.openstack.connect")
    def test_happy_path(self, mock_connect):
        conn = _connection()
        mock_connect.return_value = conn

        session = SessionProvider().authenticate()

        assert isinstance(session, Session)
        assert session.connection is conn
        assert session.region == "RegionOne"
        conn.authorize.assert_called_once_with()
        checked = [c.args[0] for c in conn.endpoint_for.call_args_list]
        assert checked == ["compute", "network", "block-storage"]

    @patch("osstatus.openstack.session.openstack.connect")
    def test_passes_cloud_region_and_timeout(self, mock_connect):
        mock_connect.return_value = _connection()

        session = SessionProvider(cloud="prod", region="RegionTwo", api_timeout=15).authenticate()

        mock_connect.assert_called_once_with(
            cloud="prod", region_name="RegionTwo", api_timeout=15
        )
        assert session.region == "RegionTwo"

    @patch("osstatus.openstack.session.openstack.connect")
    def test_reads_environment_every_call(self, mock_connect):
        mock_connect.side_effect = lambda **kwargs: _connection()
        provider = SessionProvider()

        first = provider.authenticate()
        second = provider.authenticate()

        assert mock_connect.call_count == 2
        assert first.connection is not second.connection

    @patch("osstatus.openstack.session.openstack.connect")
    def test_missing_credentials(self, mock_connect):
        mock_connect.side_effect = sdk_exceptions.ConfigException("auth_url is required")

        with pytest.raises(AuthError) as exc:
            SessionProvider().authenticate()

        assert exc.value.phase == "config"
        assert "auth_url is required" in str(exc.value)
        assert isinstance(exc.value.__cause__, sdk_exceptions.ConfigException)

    @patch("osstatus.openstack.session.openstack.connect")
    def test_rejected_credentials(self, mock_connect):
        conn = _connection()
        conn.authorize.side_effect = ksa_exceptions.Unauthorized("The request you have made requires authentication.")
        mock_connect.return_value = conn

        with pytest.raises(AuthError, match="could not authenticate") as exc:
            SessionProvider().authenticate()

        assert exc.value.phase == "authenticate"
        conn.endpoint_for.assert_not_called()

    @patch("osstatus.openstack.session.openstack.connect")
    def test_missing_auth_plugin_options(self, mock_connect):
        conn = _connection()
        conn.authorize.side_effect = ksa_exceptions.MissingAuthPlugin("no auth plugin")
        mock_connect.return_value = conn

        with pytest.raises(AuthError):
            SessionProvider().authenticate()

    @pytest.mark.parametrize(
        "service_type, accessor",
        [
            ("compute", "compute"),
            ("network", "network"),
            ("block-storage", "block_storage"),
        ],
    )
    @patch("osstatus.openstack.session.openstack.connect")
    def test_missing_endpoint(self, mock_connect, service_type, accessor):
        mock_connect.return_value = _connection(missing=(service_type,))

        with pytest.raises(AuthError, match=f"could not initialize {accessor} client") as exc:
            SessionProvider().authenticate()

        assert exc.value.phase == f"endpoint:{accessor}"

    @patch("osstatus.openstack.session.openstack.connect")
    def test_catalog_lookup_error(self, mock_connect):
        conn = _connection()
        conn.endpoint_for.side_effect = sdk_exceptions.EndpointNotFound("no catalog")
        mock_connect.return_value = conn

        with pytest.raises(AuthError, match="could not initialize compute client"):
            SessionProvider().authenticate()

    @patch("osstatus.openstack.session.openstack.connect")
    def test_load_balancer_not_required(self, mock_connect):
        mock_connect.return_value = _connection(missing=("load-balancer",))

        session = SessionProvider().authenticate()

        assert session is not None


class TestSession:
    def test_accessors_share_connection(self):
        conn = MagicMock()
        session = Session(connection=conn)

        assert session.compute is conn.compute
        assert session.network is conn.network
        assert session.block_storage is conn.block_storage
        assert session.load_balancer is conn.load_balancer
        assert session.service("network") is conn.network

    def test_close_swallows_sdk_errors(self):
        conn = MagicMock()
        conn.close.side_effect = sdk_exceptions.SDKException("already closed")

        Session(connection=conn).close()

        conn.close.assert_called_once_with()


class TestEndpoints:
    def test_reports_load_balancer_when_missing(self):
        conn = _connection(missing=("load-balancer",))
        session = Session(connection=conn, region="RegionOne")

        endpoints = SessionProvider().endpoints(session)

        assert endpoints["compute"] == "https://compute.example.com/v2"
        assert endpoints["block_storage"] == "https://block-storage.example.com/v2"
        assert endpoints["load_balancer"] is None
