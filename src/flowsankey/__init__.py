"""FlowSankey - flow telemetry shaping for Sankey visualization.

Normalizes flow-analytics graph payloads into canonical Sankey graphs,
infers dimension levels from node labels, and renders Graphviz DOT.
"""

__version__ = "0.1.0"
