"""
Serve Command - Run the Prometheus exporter.
"""
from __future__ import annotations

import logging
from typing import Optional

import typer

from osstatus.cli.errors import EXIT_CODE_MAP, ErrorCode, ExporterError, handle_errors
from osstatus.cli.options import KINDS_HELP, build_config, parse_kinds

log = logging.getLogger(__name__)


@handle_errors
def serve_cmd(
    listen_address: Optional[str] = typer.Option(
        None,
        "--web.listen-address",
        "--listen-address",
        envvar="OSSTATUS_LISTEN_ADDRESS",
        help="Address to listen on for web interface and telemetry [default: :9401]",
    ),
    metrics_path: Optional[str] = typer.Option(
        None,
        "--web.telemetry-path",
        "--metrics-path",
        envvar="OSSTATUS_METRICS_PATH",
        help="Path under which to expose metrics [default: /metrics]",
    ),
    kinds: Optional[str] = typer.Option(
        None,
        "--kinds",
        "-k",
        envvar="OSSTATUS_KINDS",
        help=KINDS_HELP + " [default: router,volume,load_balancer]",
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
        envvar="OSSTATUS_API_TIMEOUT",
        help="Seconds allowed per API request [default: 30]",
    ),
    collect_timeout: Optional[float] = typer.Option(
        None,
        "--collect-timeout",
        envvar="OSSTATUS_COLLECT_TIMEOUT",
        help="Seconds allowed per collection pass [default: 60]",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        envvar="OSSTATUS_WORKERS",
        help="Resource kinds listed in parallel [default: 4]",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="OSSTATUS_CONFIG",
        help="JSON config file; command-line options take precedence",
    ),
):
    """
    Start the Prometheus exporter.

    Every scrape of the metrics path authenticates, lists each enabled
    resource kind and reports counts per status.

    Examples:

        osstatus serve

        osstatus serve --web.listen-address :9401 --kinds router,volume,server
    """
    from osstatus.exporter.server import serve

    config = build_config(
        config_path,
        listen_address=listen_address,
        metrics_path=metrics_path,
        enabled_kinds=parse_kinds(kinds),
        cloud=cloud,
        region=region,
        api_timeout=api_timeout,
        collect_timeout=collect_timeout,
        max_workers=workers,
    )

    typer.echo(f"Starting HTTP server on {config.listen_address}", err=True)
    try:
        serve(config)
    except OSError as e:
        raise ExporterError(
            error_code=ErrorCode.INVALID_CONFIG,
            message=f"could not listen on {config.listen_address}: {e}",
            exit_code=EXIT_CODE_MAP["usage"],
        ) from e
    except KeyboardInterrupt:
        log.info("Shutting down")
    raise typer.Exit(0)
