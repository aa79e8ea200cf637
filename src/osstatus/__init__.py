"""
osstatus - OpenStack status exporter for Prometheus.

Counts routers, volumes, servers and load balancers by status on every
scrape and exposes the counts as Prometheus gauges.
"""

__version__ = "0.3.0"
