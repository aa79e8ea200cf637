import logging

# Example: Programmatic usage of osstatus
#
# This script shows how to run collection passes from your own code,
# for example to feed a different metrics backend or a health check,
# instead of serving the Prometheus endpoint.

from osstatus.core import ExporterConfig, ResourceKind
from osstatus.exporter import build_registry
from osstatus.openstack import CollectionOrchestrator


def main():
    logging.basicConfig(level=logging.INFO)

    print("osstatus Library Usage Example")
    print("==============================")

    # 1. One pass, read as plain data
    config = ExporterConfig(enabled_kinds=list(ResourceKind))
    orchestrator = CollectionOrchestrator.from_config(config)

    print("[*] Collecting...")
    result = orchestrator.collect()
    print(f"    - Operational: {result.operational}")
    for kind in orchestrator.kinds:
        print(f"    - {kind}: {result.snapshot(kind)}")

    # 2. Same pass rendered as Prometheus text, without an HTTP server
    from prometheus_client import generate_latest

    print("[*] Prometheus exposition:")
    print(generate_latest(build_registry(orchestrator)).decode("utf-8"))


if __name__ == "__main__":
    main()
