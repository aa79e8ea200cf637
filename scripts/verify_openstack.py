#!/usr/bin/env python3
"""
Verify OpenStack Connectivity and Collection
--------------------------------------------
This script verifies that the current environment can authenticate to
OpenStack with its OS_* variables and run one full collection pass.

Usage:
    source openrc.sh
    python scripts/verify_openstack.py --kinds all
"""
import argparse
import logging
import sys

from osstatus.cli.options import parse_kinds
from osstatus.core import ExporterConfig
from osstatus.openstack import CollectionOrchestrator


def main():
    parser = argparse.ArgumentParser(description="Verify OpenStack connectivity and collection.")
    parser.add_argument("--cloud", help="clouds.yaml entry (default: OS_* environment)")
    parser.add_argument("--region", help="Region to query (default: OS_REGION_NAME)")
    parser.add_argument("--kinds", default="all", help="Resource kinds to collect (default: all)")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("Starting OpenStack Verification...")
    print(f"  Cloud: {args.cloud or 'OS_* environment'}")
    print(f"  Region: {args.region or 'default'}")

    config = ExporterConfig(
        cloud=args.cloud,
        region=args.region,
        enabled_kinds=parse_kinds(args.kinds),
    )
    result = CollectionOrchestrator.from_config(config).collect()

    if result.auth_error:
        print(f"\nAuthentication failed: {result.auth_error}")
        return 2

    print(f"\nCollection {'completed' if result.operational else 'degraded'} "
          f"in {result.duration_seconds:.1f}s")
    for kind, kind_result in result.results.items():
        if not kind_result.ok:
            print(f"  {kind}: FAILED - {kind_result.error}")
            continue
        counts = ", ".join(f"{status or '<empty>'}={count}"
                           for status, count in sorted(kind_result.counts.items()))
        print(f"  {kind}: {kind_result.record_count} ({counts or 'none'})")

    return 0 if result.operational else 1


if __name__ == "__main__":
    sys.exit(main())
