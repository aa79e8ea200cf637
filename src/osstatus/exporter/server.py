"""
HTTP endpoint for Prometheus scrapes.

Serves the metrics path through prometheus_client's WSGI app and a small
HTML index at ``/``. Requests are handled on separate threads, so two
overlapping scrapes run two independent collection passes.
"""
from __future__ import annotations

import html
import logging
from typing import Any, Callable, Iterable
from wsgiref.simple_server import WSGIRequestHandler, make_server

from prometheus_client import make_wsgi_app
from prometheus_client.exposition import ThreadingWSGIServer
from prometheus_client.registry import CollectorRegistry

from osstatus.core.config import ExporterConfig, parse_listen_address
from osstatus.exporter.metrics import build_registry
from osstatus.openstack.orchestrator import CollectionOrchestrator

log = logging.getLogger(__name__)

INDEX_TEMPLATE = """<html>
<head><title>OpenStack Status Exporter</title></head>
<body>
<h1>OpenStack Status Exporter</h1>
<p><a href='{path}'>Metrics</a></p>
</body>
</html>
"""

StartResponse = Callable[..., Any]


class _LoggingHandler(WSGIRequestHandler):
    """Send access logs to the logging module instead of stderr."""

    def log_message(self, format: str, *args: Any) -> None:
        log.debug("%s - %s", self.address_string(), format % args)


def build_app(registry: CollectorRegistry, metrics_path: str = "/metrics"):
    """
    WSGI app routing the metrics path and the index page.

    Args:
        registry: Registry holding the status collector
        metrics_path: Path serving the text exposition
    """
    metrics_app = make_wsgi_app(registry)
    index = INDEX_TEMPLATE.format(path=html.escape(metrics_path, quote=True)).encode("utf-8")

    def app(environ: dict, start_response: StartResponse) -> Iterable[bytes]:
        path = environ.get("PATH_INFO") or "/"
        if path == metrics_path:
            return metrics_app(environ, start_response)
        if path == "/":
            start_response(
                "200 OK",
                [("Content-Type", "text/html; charset=utf-8"), ("Content-Length", str(len(index)))],
            )
            return [index]
        start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])
        return [b"Not Found\n"]

    return app


def create_server(config: ExporterConfig, orchestrator: CollectionOrchestrator | None = None):
    """Bind the exporter's HTTP server without starting it."""
    orchestrator = orchestrator or CollectionOrchestrator.from_config(config)
    host, port = parse_listen_address(config.listen_address)
    app = build_app(build_registry(orchestrator), config.metrics_path)
    # Empty host means every interface, as with Go's ":9401"
    return make_server(
        host or "0.0.0.0",
        port,
        app,
        server_class=ThreadingWSGIServer,
        handler_class=_LoggingHandler,
    )


def serve(config: ExporterConfig) -> None:
    """Run the exporter until interrupted."""
    httpd = create_server(config)
    log.info(
        "Starting HTTP server on %s (metrics at %s, kinds: %s)",
        config.listen_address,
        config.metrics_path,
        ", ".join(str(kind) for kind in config.enabled_kinds),
    )
    try:
        httpd.serve_forever()
    finally:
        httpd.server_close()
