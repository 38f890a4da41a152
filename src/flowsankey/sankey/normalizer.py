"""Sankey payload normalization.

Turns either raw graph variant into a ``CanonicalGraph``: unique node
labels in first-seen order and one aggregated link per ordered pair.
Malformed numbers are coerced, never raised; node-link edges pointing
outside the node list are dropped and counted.
"""

import math
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from flowsankey.common.logging import get_logger
from flowsankey.common.metrics import (
    SANKEY_GRAPHS_NORMALIZED,
    SANKEY_LINKS_DROPPED,
    SANKEY_LINKS_PER_GRAPH,
)
from flowsankey.sankey.models import (
    CanonicalGraph,
    CanonicalLink,
    NodeLinkGraph,
    PathRowsGraph,
    RawGraph,
    parse_raw_graph,
)

logger = get_logger(__name__)


def _field(name: str) -> Callable[[Mapping[str, Any]], Any]:
    def accessor(link: Mapping[str, Any]) -> Any:
        return link.get(name)

    accessor.__name__ = f"link_{name}"
    return accessor


# Link value accessors, tried in order until one yields a non-null value
LINK_VALUE_ACCESSORS: tuple[Callable[[Mapping[str, Any]], Any], ...] = (
    _field("value"),
    _field("weight"),
    _field("bytes"),
    _field("count"),
    _field("v"),
    _field("xps"),
)


def to_number(raw: Any, default: float = 0) -> float:
    """Coerce a loosely-typed value to a finite number.

    Ints and floats pass through, numeric strings are parsed. Anything
    else, including NaN, infinities and integers too large for a float,
    becomes ``default``.

    Args:
        raw: Value from an untrusted payload.
        default: Replacement for unusable values.

    Returns:
        A finite number, or ``default``.
    """
    if isinstance(raw, bool):
        return int(raw)
    if isinstance(raw, int):
        # Integers beyond float range count as infinite
        try:
            float(raw)
        except OverflowError:
            return default
        return raw
    if isinstance(raw, float):
        number = raw
    elif isinstance(raw, str):
        try:
            number = float(raw) if raw.strip() else 0
        except ValueError:
            return default
    else:
        return default

    if isinstance(number, float) and not math.isfinite(number):
        return default
    return number


def resolve_link_value(link: Mapping[str, Any]) -> float:
    """Resolve a link's value through ``LINK_VALUE_ACCESSORS``."""
    for accessor in LINK_VALUE_ACCESSORS:
        raw = accessor(link)
        if raw is not None:
            return to_number(raw, 0)
    return 0


def _endpoint_index(link: Mapping[str, Any], key: str) -> int | None:
    """Coerce an endpoint to an integer index, or None if not integral.

    An explicit null endpoint counts as 0; a missing one is unusable.
    """
    if key not in link:
        return None
    raw = link[key]
    number = 0 if raw is None else to_number(raw, -1)
    if isinstance(number, float):
        if not number.is_integer():
            return None
        number = int(number)
    return number


class _LinkAccumulator:
    """Running per-(source, target) totals for one normalization call."""

    def __init__(self) -> None:
        self._totals: dict[tuple[int, int], float] = {}

    def add(self, source: int, target: int, value: float) -> None:
        key = (source, target)
        self._totals[key] = self._totals.get(key, 0) + value

    def links(self) -> list[CanonicalLink]:
        return [
            CanonicalLink(source=source, target=target, value=value)
            for (source, target), value in self._totals.items()
        ]


def _normalize_node_link(raw: NodeLinkGraph) -> CanonicalGraph:
    nodes = [str(label) for label in raw.nodes]
    index_of: dict[str, int] = {}
    for i, label in enumerate(nodes):
        index_of.setdefault(label, i)

    def intern(label: str) -> int:
        i = index_of.get(label)
        if i is None:
            i = len(nodes)
            nodes.append(label)
            index_of[label] = i
        return i

    totals = _LinkAccumulator()
    dropped = 0

    for link in raw.links:
        if not isinstance(link, Mapping):
            dropped += 1
            continue

        value = resolve_link_value(link)
        source = link.get("source")
        target = link.get("target")

        if isinstance(source, str) and isinstance(target, str):
            # Label-addressed edges may introduce nodes absent from raw.nodes
            source_idx = intern(source)
            target_idx = intern(target)
        else:
            source_idx = _endpoint_index(link, "source")
            target_idx = _endpoint_index(link, "target")
            if source_idx is None or target_idx is None:
                dropped += 1
                continue
            if not (0 <= source_idx < len(nodes) and 0 <= target_idx < len(nodes)):
                dropped += 1
                continue

        totals.add(source_idx, target_idx, value)

    return CanonicalGraph(nodes=nodes, links=totals.links(), dropped_links=dropped)


def _normalize_path_rows(raw: PathRowsGraph) -> CanonicalGraph:
    values: Sequence[Any] = raw.values if raw.values is not None else ()
    nodes: list[str] = []
    index_of: dict[str, int] = {}

    def intern(label: Any) -> int:
        key = str(label)
        i = index_of.get(key)
        if i is None:
            i = len(nodes)
            nodes.append(key)
            index_of[key] = i
        return i

    totals = _LinkAccumulator()

    for row_index, path in enumerate(raw.rows):
        if isinstance(path, (str, bytes)) or not isinstance(path, Sequence) or len(path) < 2:
            continue

        value = to_number(values[row_index], 0) if row_index < len(values) else 0
        for current, following in zip(path, path[1:]):
            totals.add(intern(current), intern(following), value)

    return CanonicalGraph(nodes=nodes, links=totals.links())


def normalize(raw: Mapping[str, Any] | RawGraph) -> CanonicalGraph:
    """Normalize a raw Sankey payload into a canonical graph.

    Args:
        raw: Decoded backend response, or a typed ``RawGraph`` variant.

    Returns:
        Canonical graph with deduplicated, aggregated links.

    Raises:
        UnrecognizedFormatError: If the payload matches neither variant.
    """
    graph = parse_raw_graph(raw)

    match graph:
        case NodeLinkGraph():
            result = _normalize_node_link(graph)
        case PathRowsGraph():
            result = _normalize_path_rows(graph)

    SANKEY_GRAPHS_NORMALIZED.labels(variant=graph.variant.value).inc()
    SANKEY_LINKS_PER_GRAPH.observe(len(result.links))
    if result.dropped_links:
        SANKEY_LINKS_DROPPED.inc(result.dropped_links)

    logger.debug(
        "Normalized Sankey graph",
        variant=graph.variant.value,
        nodes=len(result.nodes),
        links=len(result.links),
        dropped_links=result.dropped_links,
    )

    return result
