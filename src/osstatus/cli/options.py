"""Options shared by the serve and collect commands."""
from __future__ import annotations

from typing import Any, Optional

import typer

from osstatus.core.config import ExporterConfig
from osstatus.core.schema import ResourceKind

KINDS_HELP = (
    "Comma-separated resource kinds to collect: "
    + ", ".join(kind.value for kind in ResourceKind)
)


def parse_kinds(value: Optional[str]) -> Optional[list[ResourceKind]]:
    """Parse ``router,volume`` into kinds. ``all`` enables every kind."""
    if value is None:
        return None
    names = [name.strip().lower().replace("-", "_") for name in value.split(",") if name.strip()]
    if names == ["all"]:
        return list(ResourceKind)
    kinds = []
    for name in names:
        if name == "lb":
            name = ResourceKind.LOAD_BALANCER.value
        try:
            kinds.append(ResourceKind(name))
        except ValueError:
            raise typer.BadParameter(
                f"unknown resource kind {name!r}", param_hint="--kinds"
            ) from None
    return kinds


def build_config(config_path: Optional[str] = None, **overrides: Any) -> ExporterConfig:
    """
    Merge a JSON config file with command-line overrides.

    Overrides set to None are ignored so file values (or model defaults)
    apply.
    """
    base: dict[str, Any] = {}
    if config_path:
        base = ExporterConfig.load(config_path).model_dump()
    base.update({key: value for key, value in overrides.items() if value is not None})
    return ExporterConfig(**base)
