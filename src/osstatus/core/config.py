"""
Exporter Configuration - Listener, collection and timeout settings.

Credentials and region are NOT part of this model: they are read from the
OS_* environment (or clouds.yaml) at the start of every collection pass.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from osstatus.core.schema import DEFAULT_KINDS, ResourceKind


class BaseConfig(BaseModel):
    """Base configuration for exporter settings."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
    )


class ExporterConfig(BaseConfig):
    """Settings for the exporter process."""

    listen_address: str = Field(
        ":9401",
        description="Address to listen on for web interface and telemetry",
    )
    metrics_path: str = Field(
        "/metrics",
        description="Path under which to expose metrics",
    )

    # Server listing is available but off by default
    enabled_kinds: list[ResourceKind] = Field(
        default_factory=lambda: list(DEFAULT_KINDS),
    )

    # clouds.yaml entry; None means OS_* environment variables
    cloud: Optional[str] = None
    region: Optional[str] = None

    api_timeout: float = Field(30.0, gt=0, description="Seconds per API request")
    collect_timeout: float = Field(60.0, gt=0, description="Seconds per collection pass")
    max_workers: int = Field(4, ge=1, description="Kinds fetched in parallel")

    @field_validator("metrics_path")
    @classmethod
    def _check_metrics_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("metrics_path must start with '/'")
        if value == "/":
            raise ValueError("metrics_path cannot be the root page")
        return value

    @field_validator("listen_address")
    @classmethod
    def _check_listen_address(cls, value: str) -> str:
        parse_listen_address(value)
        return value

    @field_validator("enabled_kinds")
    @classmethod
    def _dedupe_kinds(cls, value: list[ResourceKind]) -> list[ResourceKind]:
        if not value:
            raise ValueError("at least one resource kind must be enabled")
        return list(dict.fromkeys(value))

    @classmethod
    def load(cls, path: str) -> ExporterConfig:
        """Load configuration from a JSON file."""
        import json
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls(**data)


def parse_listen_address(address: str) -> tuple[str, int]:
    """
    Split ``host:port`` into its parts.

    ``:9401`` listens on all interfaces. Bracketed IPv6 hosts
    (``[::1]:9401``) are unwrapped.
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"listen address must be host:port, got {address!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port_number = int(port)
    except ValueError:
        raise ValueError(f"invalid port in listen address {address!r}") from None
    if not 0 <= port_number < 65536:
        raise ValueError(f"port out of range in listen address {address!r}")
    return host, port_number
