"""
Collect Command - Run a single collection pass and print it.
"""
from __future__ import annotations

import logging
from typing import Optional

import typer

from osstatus.cli.errors import EXIT_CODE_MAP, handle_errors
from osstatus.cli.options import KINDS_HELP, build_config, parse_kinds
from osstatus.cli.output import emit_json, resolve_format
from osstatus.cli.schemas import CollectResponse
from osstatus.core.schema import CollectionResult

log = logging.getLogger(__name__)


@handle_errors
def collect_cmd(
    kinds: Optional[str] = typer.Option(
        None,
        "--kinds",
        "-k",
        envvar="OSSTATUS_KINDS",
        help=KINDS_HELP,
    ),
    cloud: Optional[str] = typer.Option(
        None,
        "--cloud",
        envvar="OSSTATUS_CLOUD",
        help="clouds.yaml entry to use instead of OS_* variables",
    ),
    region: Optional[str] = typer.Option(
        None,
        "--region",
        help="Region to query (overrides OS_REGION_NAME)",
    ),
    api_timeout: Optional[float] = typer.Option(
        None,
        "--api-timeout",
        help="Seconds allowed per API request",
    ),
    collect_timeout: Optional[float] = typer.Option(
        None,
        "--collect-timeout",
        help="Seconds allowed for the pass",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        help="Resource kinds listed in parallel",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="OSSTATUS_CONFIG",
        help="JSON config file; command-line options take precedence",
    ),
    format: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: text, json (defaults to json when piped)",
    ),
):
    """
    Run one collection pass and print status counts.

    Useful for checking credentials and filters before pointing Prometheus
    at the exporter. Exits 1 when any kind failed.

    Examples:

        osstatus collect

        osstatus collect --kinds all --format json
    """
    from osstatus.openstack import CollectionOrchestrator

    output_format = resolve_format(format, default_tty="text", allowed=["text", "json"])
    config = build_config(
        config_path,
        enabled_kinds=parse_kinds(kinds),
        cloud=cloud,
        region=region,
        api_timeout=api_timeout,
        collect_timeout=collect_timeout,
        max_workers=workers,
    )

    orchestrator = CollectionOrchestrator.from_config(config)
    result = orchestrator.collect()

    if output_format == "json":
        emit_json(
            _summary(result, orchestrator.kinds),
            schema=CollectResponse,
            status="success" if result.operational else "degraded",
        )
    else:
        _print_table(result, orchestrator.kinds)

    raise typer.Exit(EXIT_CODE_MAP["ok" if result.operational else "degraded"])


def _summary(result: CollectionResult, kinds) -> dict:
    kind_rows = []
    for kind in kinds:
        kind_result = result.results.get(kind)
        kind_rows.append({
            "kind": kind.value,
            "ok": bool(kind_result and kind_result.ok),
            "counts": result.snapshot(kind),
            "record_count": kind_result.record_count if kind_result else 0,
            "duration_seconds": kind_result.duration_seconds if kind_result else 0.0,
            "error": kind_result.error if kind_result else result.auth_error,
        })
    return {
        "operational": result.operational,
        "auth_error": result.auth_error,
        "started_at": result.started_at.isoformat(),
        "duration_seconds": result.duration_seconds,
        "kinds": kind_rows,
    }


def _print_table(result: CollectionResult, kinds) -> None:
    from rich import box
    from rich.console import Console
    from rich.table import Table

    console = Console()
    if result.auth_error:
        console.print(f"[red]Authentication failed:[/red] {result.auth_error}")
        return

    table = Table(
        title=f"OpenStack status ({result.duration_seconds:.1f}s)",
        box=box.SIMPLE,
    )
    table.add_column("Kind", style="bold")
    table.add_column("Status")
    table.add_column("Count", justify="right")

    for kind in kinds:
        kind_result = result.results.get(kind)
        if kind_result is None:
            continue
        if not kind_result.ok:
            table.add_row(kind.value, f"[red]failed[/red]: {kind_result.error}", "-")
            continue
        if not kind_result.counts:
            table.add_row(kind.value, "[dim](none)[/dim]", "0")
        for status, count in sorted(kind_result.counts.items()):
            table.add_row(kind.value, status or '""', str(count))

    console.print(table)
    state = "[green]operational[/green]" if result.operational else "[yellow]degraded[/yellow]"
    console.print(f"Collection {state}")
