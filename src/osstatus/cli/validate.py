"""
Validate Auth Command - Check credentials and endpoints without listing anything.
"""
from __future__ import annotations

from typing import Optional

import typer

from osstatus.cli.errors import EXIT_CODE_MAP, ErrorCode, ExporterError, handle_errors
from osstatus.cli.output import emit_json
from osstatus.cli.schemas import ValidateAuthResponse


@handle_errors
def validate_auth_cmd(
    cloud: Optional[str] = typer.Option(
        None,
        "--cloud",
        envvar="OSSTATUS_CLOUD",
        help="clouds.yaml entry to use instead of OS_* variables",
    ),
    region: Optional[str] = typer.Option(
        None,
        "--region",
        help="Region to check (overrides OS_REGION_NAME)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
):
    """
    Validate that the exporter can authenticate.

    Authenticates with the ambient OS_* credentials and checks that the
    compute, network and block-storage endpoints exist in the region.

    Examples:

        osstatus validate-auth

        osstatus validate-auth --cloud mycloud --json
    """
    from osstatus.openstack import AuthError, SessionProvider

    typer.echo("Validating OpenStack credentials...", err=True)
    provider = SessionProvider(cloud=cloud, region=region)

    try:
        session = provider.authenticate()
    except AuthError as e:
        raise ExporterError(
            error_code=ErrorCode.AUTH_ERROR,
            message=f"authentication failed ({e.phase}): {e}",
            hint="Check the OS_* variables or the --cloud entry in clouds.yaml",
            exit_code=EXIT_CODE_MAP["usage"],
        ) from e

    try:
        endpoints = provider.endpoints(session)
    finally:
        session.close()

    result = {
        "success": True,
        "region": session.region,
        "endpoints": endpoints,
    }
    if json_output:
        emit_json(result, schema=ValidateAuthResponse)
    else:
        typer.echo("", err=True)
        typer.echo("✓ Authentication successful!", err=True)
        typer.echo(f"  Region: {session.region or 'default'}", err=True)
        for name, url in endpoints.items():
            typer.echo(f"  {name}: {url or 'not available'}", err=True)
    raise typer.Exit(0)
