"""Graphviz DOT emission for canonical Sankey graphs.

Nodes are declared as ``n<index>`` so identifiers never depend on label
content. Node fill follows the inferred dimension level; edge width is
log-scaled from the aggregated value.
"""

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Literal

from flowsankey.common.config import DEFAULT_LEVEL_COLORS, SankeySettings
from flowsankey.common.formatting import format_value, to_fixed
from flowsankey.common.metrics import SANKEY_GRAPHS_EMITTED
from flowsankey.sankey.levels import infer_levels
from flowsankey.sankey.models import CanonicalGraph
from flowsankey.sankey.normalizer import to_number

EDGE_COLOR_NEUTRAL = "#7c8ea3"
NODE_ID_PREFIX = "n"

ValueLabelFormatter = Callable[[float, str | None], str]
RankDir = Literal["LR", "RL", "TB", "BT"]


@dataclass(frozen=True)
class DotTheme:
    """Styling options for DOT emission."""

    # Only affects edge label text ("l3bps", "pps", "bytes", ...)
    units: str | None = None
    penwidth_min: float = 1
    penwidth_scale: float = 1
    level_order: Sequence[str] | None = None
    level_colors: Sequence[str] = field(default_factory=lambda: tuple(DEFAULT_LEVEL_COLORS))
    node_fill_default: str = "#eef5ff"
    rankdir: RankDir = "LR"
    fontname: str = "Inter,Arial"
    color_nodes_by_level: bool = True
    color_edges_by_source_level: bool = False
    # Overrides the units-based label when set
    format_value_label: ValueLabelFormatter | None = None

    @classmethod
    def from_settings(cls, settings: SankeySettings, **overrides) -> "DotTheme":
        """Build a theme from configuration, with per-call overrides."""
        options = {
            "units": settings.units,
            "penwidth_min": settings.penwidth_min,
            "penwidth_scale": settings.penwidth_scale,
            "level_order": settings.level_order,
            "level_colors": tuple(settings.level_colors),
            "node_fill_default": settings.node_fill_default,
            "rankdir": settings.rankdir,
            "fontname": settings.fontname,
            "color_nodes_by_level": settings.color_nodes_by_level,
            "color_edges_by_source_level": settings.color_edges_by_source_level,
        }
        options.update(overrides)
        return cls(**options)


def escape(text: object) -> str:
    """Backslash-escape double quotes. Nothing else is touched."""
    return str(text).replace('"', '\\"')


def node_id(index: int) -> str:
    return f"{NODE_ID_PREFIX}{index}"


def penwidth(value: float, minimum: float = 1, scale: float = 1) -> float:
    """Stroke width ``max(minimum, log10(value + 1) * scale)``."""
    if value <= -1:
        return minimum
    return max(minimum, math.log10(value + 1) * scale)


def _level_color(level: int | None, theme: DotTheme) -> str:
    if level is None or level < 0 or not theme.level_colors:
        return theme.node_fill_default
    return theme.level_colors[level % len(theme.level_colors)] or theme.node_fill_default


def emit_dot(graph: CanonicalGraph, theme: DotTheme | None = None) -> str:
    """Render a canonical graph as a Graphviz digraph.

    Args:
        graph: Normalized Sankey graph.
        theme: Styling options. Defaults to ``DotTheme()``.

    Returns:
        DOT source text, terminated by a newline.
    """
    theme = theme or DotTheme()
    fmt = theme.format_value_label or format_value
    levels = infer_levels(graph.nodes, theme.level_order)

    def level_of(index: int) -> int | None:
        return levels[index] if 0 <= index < len(levels) else None

    lines = [
        "digraph Sankey {",
        f"  rankdir={theme.rankdir};",
        f'  node [shape=box, style="rounded,filled", '
        f'fillcolor="{theme.node_fill_default}", fontname="{escape(theme.fontname)}"];',
    ]

    for i, label in enumerate(graph.nodes):
        fill = _level_color(levels[i], theme) if theme.color_nodes_by_level else theme.node_fill_default
        lines.append(f'  {node_id(i)} [label="{escape(label)}", fillcolor="{fill}"];')

    for link in graph.links:
        value = to_number(link.value, 0)
        pen = penwidth(value, theme.penwidth_min, theme.penwidth_scale)
        label = escape(fmt(value, theme.units))
        color = (
            _level_color(level_of(link.source), theme)
            if theme.color_edges_by_source_level
            else EDGE_COLOR_NEUTRAL
        )
        lines.append(
            f'  {node_id(link.source)} -> {node_id(link.target)} '
            f'[label="{label}", penwidth={to_fixed(pen, 2)}, color="{color}"];'
        )

    lines.append("}")
    SANKEY_GRAPHS_EMITTED.inc()
    return "\n".join(lines) + "\n"
