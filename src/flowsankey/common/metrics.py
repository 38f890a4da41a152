"""Prometheus metrics for FlowSankey.

Counters and histograms describing normalization and emission volume.
"""

from prometheus_client import Counter, Histogram, Info

# Application info
APP_INFO = Info(
    "flowsankey",
    "FlowSankey application information",
)

SANKEY_GRAPHS_NORMALIZED = Counter(
    "flowsankey_graphs_normalized_total",
    "Total number of raw graph payloads normalized",
    ["variant"],
)

SANKEY_LINKS_DROPPED = Counter(
    "flowsankey_links_dropped_total",
    "Total number of links dropped for invalid endpoint indices",
)

SANKEY_LINKS_PER_GRAPH = Histogram(
    "flowsankey_links_per_graph",
    "Number of aggregated links per normalized graph",
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000, 5000],
)

SANKEY_GRAPHS_EMITTED = Counter(
    "flowsankey_graphs_emitted_total",
    "Total number of DOT descriptions emitted",
)


def set_app_info(version: str, environment: str) -> None:
    """Set application info metric."""
    APP_INFO.info({
        "version": version,
        "environment": environment,
    })
