"""
osstatus CLI

Main entry point for the CLI application.
"""

from __future__ import annotations

import logging
import sys

import typer

app = typer.Typer(
    name="osstatus",
    help="Export OpenStack resource status counts to Prometheus",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all output except errors",
    ),
):
    """
    osstatus - OpenStack Status Exporter

    Counts OpenStack resources by status on every Prometheus scrape:

    - Routers, volumes and load balancers (servers on request)

    - One authenticated session per scrape, read from OS_* variables

    Run 'osstatus COMMAND --help' for command-specific help.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    if not verbose:
        # keystoneauth and the SDK are chatty at INFO
        for name in ("keystoneauth", "openstack", "urllib3"):
            logging.getLogger(name).setLevel(logging.WARNING)


@app.command()
def version():
    """Show version information."""
    from osstatus import __version__

    typer.echo(f"osstatus {__version__}")


# Register subcommands at module load time.
# Each command is imported individually so a single broken import
# does not prevent the other commands from registering.
_log = logging.getLogger(__name__)

_COMMANDS: list[tuple[str, str]] = [
    # (cli_name, import_path)
    ("serve", "osstatus.cli.serve:serve_cmd"),
    ("collect", "osstatus.cli.collect:collect_cmd"),
    ("validate-auth", "osstatus.cli.validate:validate_auth_cmd"),
]

for _name, _import_path in _COMMANDS:
    try:
        _module_path, _attr = _import_path.rsplit(":", 1)
        import importlib as _importlib

        _mod = _importlib.import_module(_module_path)
        app.command(_name)(getattr(_mod, _attr))
    except (ImportError, AttributeError) as _err:
        _log.warning("Failed to register command '%s': %s", _name, _err)


if __name__ == "__main__":
    app()
