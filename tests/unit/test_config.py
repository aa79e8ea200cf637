"""Unit tests for exporter configuration."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from osstatus.core.config import ExporterConfig, parse_listen_address
from osstatus.core.schema import DEFAULT_KINDS, ResourceKind


class TestExporterConfig:
    def test_defaults(self):
        config = ExporterConfig()

        assert config.listen_address == ":9401"
        assert config.metrics_path == "/metrics"
        assert config.enabled_kinds == list(DEFAULT_KINDS)
        assert ResourceKind.SERVER not in config.enabled_kinds
        assert config.cloud is None
        assert config.api_timeout == 30.0
        assert config.collect_timeout == 60.0
        assert config.max_workers == 4

    def test_kinds_from_strings_deduplicated(self):
        config = ExporterConfig(enabled_kinds=["server", "router", "server"])
        assert config.enabled_kinds == [ResourceKind.SERVER, ResourceKind.ROUTER]

    def test_empty_kinds_rejected(self):
        with pytest.raises(ValidationError, match="at least one resource kind"):
            ExporterConfig(enabled_kinds=[])

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            ExporterConfig(enabled_kinds=["floating_ip"])

    @pytest.mark.parametrize("path", ["metrics", "/"])
    def test_bad_metrics_path(self, path):
        with pytest.raises(ValidationError):
            ExporterConfig(metrics_path=path)

    def test_metrics_path_whitespace_stripped(self):
        assert ExporterConfig(metrics_path="  /probe ").metrics_path == "/probe"

    def test_bad_listen_address(self):
        with pytest.raises(ValidationError, match="listen address"):
            ExporterConfig(listen_address="9401")

    @pytest.mark.parametrize("field", ["api_timeout", "collect_timeout"])
    def test_timeouts_positive(self, field):
        with pytest.raises(ValidationError):
            ExporterConfig(**{field: 0})

    def test_workers_at_least_one(self):
        with pytest.raises(ValidationError):
            ExporterConfig(max_workers=0)

    def test_extra_fields_forbidden(self):
        with pytest.raises(ValidationError):
            ExporterConfig(password="hunter2")

    def test_load_json(self, tmp_path):
        path = tmp_path / "osstatus.json"
        path.write_text(json.dumps({
            "listen_address": "127.0.0.1:9500",
            "enabled_kinds": ["router", "volume", "server", "load_balancer"],
            "region": "RegionTwo",
        }))

        config = ExporterConfig.load(str(path))

        assert config.listen_address == "127.0.0.1:9500"
        assert ResourceKind.SERVER in config.enabled_kinds
        assert config.region == "RegionTwo"


class TestParseListenAddress:
    @pytest.mark.parametrize(
        "address, expected",
        [
            (":9401", ("", 9401)),
            ("0.0.0.0:9401", ("0.0.0.0", 9401)),
            ("localhost:80", ("localhost", 80)),
            ("[::1]:9401", ("::1", 9401)),
            ("127.0.0.1:0", ("127.0.0.1", 0)),
        ],
    )
    def test_valid(self, address, expected):
        assert parse_listen_address(address) == expected

    @pytest.mark.parametrize("address", ["9401", ":http", ":70000", ""])
    def test_invalid(self, address):
        with pytest.raises(ValueError):
            parse_listen_address(address)
