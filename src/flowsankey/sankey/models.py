"""Raw and canonical Sankey graph structures.

The flow-analytics backend answers graph queries in one of two shapes:

* node-link: ``{"nodes": [...], "links": [{"source", "target", "value"}]}``
* rows: ``{"rows": [["A", "B", ...], ...], "values": [...]}``

Both are modelled as explicit variants of ``RawGraph`` so the normalizer
can dispatch on type instead of probing dictionary keys.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from flowsankey.common.exceptions import UnrecognizedFormatError


class GraphVariant(str, Enum):
    """Discriminant for raw graph payload shapes."""

    NODE_LINK = "node_link"
    PATH_ROWS = "path_rows"


@dataclass(frozen=True)
class NodeLinkGraph:
    """Variant A: node labels plus index- or label-addressed links."""

    nodes: Sequence[Any]
    links: Sequence[Mapping[str, Any]]
    meta: Mapping[str, Any] | None = None

    variant = GraphVariant.NODE_LINK


@dataclass(frozen=True)
class PathRowsGraph:
    """Variant B: label paths with one value per path.

    ``values`` holds whichever value array the payload carried
    (``values``, ``weights``, ``v`` or ``xps``), or ``None``.
    """

    rows: Sequence[Any]
    values: Sequence[Any] | None = None
    meta: Mapping[str, Any] | None = None

    variant = GraphVariant.PATH_ROWS


RawGraph = NodeLinkGraph | PathRowsGraph

# Alternate names for the per-row value array, in priority order
ROW_VALUE_KEYS: tuple[str, ...] = ("values", "weights", "v", "xps")


def _as_sequence(value: Any) -> Sequence[Any]:
    """Treat anything but a list-like value as empty."""
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    return []


def parse_raw_graph(payload: Mapping[str, Any] | RawGraph) -> RawGraph:
    """Classify a decoded JSON payload into a raw graph variant.

    Args:
        payload: Backend response body, or an already-typed raw graph.

    Returns:
        ``NodeLinkGraph`` when both ``nodes`` and ``links`` are present,
        otherwise ``PathRowsGraph`` when ``rows`` is present.

    Raises:
        UnrecognizedFormatError: If the payload matches neither shape.
    """
    if isinstance(payload, (NodeLinkGraph, PathRowsGraph)):
        return payload

    if not isinstance(payload, Mapping):
        raise UnrecognizedFormatError(
            details={"type": type(payload).__name__},
        )

    meta = payload.get("meta")

    if "nodes" in payload and "links" in payload:
        return NodeLinkGraph(
            nodes=_as_sequence(payload["nodes"]),
            links=_as_sequence(payload["links"]),
            meta=meta,
        )

    if "rows" in payload:
        values = None
        for key in ROW_VALUE_KEYS:
            if payload.get(key) is not None:
                values = _as_sequence(payload[key])
                break
        return PathRowsGraph(
            rows=_as_sequence(payload["rows"]),
            values=values,
            meta=meta,
        )

    raise UnrecognizedFormatError(details={"keys": sorted(str(k) for k in payload)})


@dataclass(frozen=True)
class CanonicalLink:
    """Aggregated link between two node indices."""

    source: int
    target: int
    value: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return {"source": self.source, "target": self.target, "value": self.value}


@dataclass
class CanonicalGraph:
    """Deduplicated, index-referenced Sankey graph.

    Attributes:
        nodes: Unique labels in first-seen order.
        links: At most one link per ordered (source, target) pair.
        dropped_links: Node-link edges discarded for invalid endpoints.
    """

    nodes: list[str] = field(default_factory=list)
    links: list[CanonicalLink] = field(default_factory=list)
    dropped_links: int = field(default=0, compare=False)

    def label(self, index: int) -> str:
        """Get a node label, or ``#index`` when out of range."""
        if 0 <= index < len(self.nodes):
            return self.nodes[index]
        return f"#{index}"

    def top_links(self, n: int | None = None) -> list[CanonicalLink]:
        """Get links sorted by descending value, optionally truncated."""
        ordered = sorted(self.links, key=lambda link: link.value, reverse=True)
        return ordered if n is None else ordered[:n]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the ``{"nodes", "links"}`` wire representation."""
        return {
            "nodes": list(self.nodes),
            "links": [link.to_dict() for link in self.links],
        }
