"""Dimension level inference from node labels.

Backend labels carry the dimension they belong to as a prefix, e.g.
``"SrcAS: 15169: Google"`` sits on the ``SrcAS`` level. Levels drive node
colouring and follow either an explicit order or first appearance.
"""

import re
from collections.abc import Sequence

NO_LEVEL = -1

_PREFIX_RE = re.compile(r"^\s*([^:]+)\s*:")


def label_prefix(label: str) -> str:
    """Get the trimmed text before the first colon of a label.

    Returns:
        The prefix, or ``""`` when the label has no usable prefix.
    """
    match = _PREFIX_RE.match(str(label))
    return match.group(1).strip() if match else ""


def infer_levels(
    nodes: Sequence[str],
    level_order: Sequence[str] | None = None,
) -> list[int]:
    """Assign a level index to every node.

    With ``level_order``, a prefix's level is its position in that list
    and unknown prefixes are stacked after it in first-encounter order.
    Without it, levels follow the first appearance of each prefix.
    Nodes without a prefix get ``NO_LEVEL``.

    Args:
        nodes: Node labels in canonical order.
        level_order: Optional explicit prefix order.

    Returns:
        One level per node, parallel to ``nodes``.
    """
    levels_by_prefix: dict[str, int] = {}
    explicit = list(level_order) if level_order is not None else None
    overflow = 0

    def level_for(prefix: str) -> int:
        nonlocal overflow
        if not prefix:
            return NO_LEVEL

        level = levels_by_prefix.get(prefix)
        if level is not None:
            return level

        if explicit is None:
            level = len(levels_by_prefix)
        elif prefix in explicit:
            level = explicit.index(prefix)
        else:
            level = len(explicit) + overflow
            overflow += 1

        levels_by_prefix[prefix] = level
        return level

    return [level_for(label_prefix(label)) for label in nodes]
