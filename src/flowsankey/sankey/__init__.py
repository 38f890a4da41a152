"""Sankey graph shaping - normalization, level inference, DOT emission.

Stages run leaves-first: ``normalize`` a raw backend payload, then
``emit_dot`` the canonical graph (which infers levels internally).
"""

from flowsankey.sankey.dot import DotTheme, emit_dot, escape, penwidth
from flowsankey.sankey.levels import NO_LEVEL, infer_levels, label_prefix
from flowsankey.sankey.models import (
    CanonicalGraph,
    CanonicalLink,
    GraphVariant,
    NodeLinkGraph,
    PathRowsGraph,
    RawGraph,
    parse_raw_graph,
)
from flowsankey.sankey.normalizer import normalize, resolve_link_value, to_number

__all__ = [
    # Models
    "CanonicalGraph",
    "CanonicalLink",
    "GraphVariant",
    "NodeLinkGraph",
    "PathRowsGraph",
    "RawGraph",
    "parse_raw_graph",
    # Normalization
    "normalize",
    "resolve_link_value",
    "to_number",
    # Levels
    "NO_LEVEL",
    "infer_levels",
    "label_prefix",
    # DOT
    "DotTheme",
    "emit_dot",
    "escape",
    "penwidth",
]
