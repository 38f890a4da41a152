"""Command-line entry point.

Usage:
    flowsankey summary sankey.json --top 20 --units l3bps
    flowsankey dot sankey.json --level-order SrcAS,ExporterAddress --out flows.dot
    flowsankey query --dims SrcAS,ExporterAddress --minutes 60 --sankey

``PAYLOAD`` is a saved graph-query response body; ``-`` reads stdin.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

import pydantic

from flowsankey.common.config import Settings, get_settings
from flowsankey.common.exceptions import FlowSankeyError, ValidationError
from flowsankey.common.formatting import format_value
from flowsankey.common.logging import get_logger, setup_logging
from flowsankey.common.metrics import set_app_info
from flowsankey.query.builder import QueryBuilder
from flowsankey.query.enums import Dimension
from flowsankey.sankey.dot import DotTheme, emit_dot
from flowsankey.sankey.normalizer import normalize

logger = get_logger(__name__)


def _split_list(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def load_payload(source: str) -> Any:
    """Read and decode a JSON payload from a path or stdin.

    Raises:
        ValidationError: If the payload is not valid JSON.
    """
    try:
        if source == "-":
            text = sys.stdin.read()
        else:
            text = Path(source).read_text(encoding="utf-8")
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(
            f"Payload is not valid JSON: {e.msg}",
            details={"source": source, "line": e.lineno, "column": e.colno},
            cause=e,
        ) from e


def cmd_summary(args: argparse.Namespace, settings: Settings) -> int:
    graph = normalize(load_payload(args.payload))
    units = args.units or settings.query.units
    top = args.top or settings.query.top

    print(
        f"Sankey | nodes={len(graph.nodes)} | links={len(graph.links)}"
        f" | dropped={graph.dropped_links} | top={top} | units={units}"
    )
    for link in graph.top_links(top):
        print(
            f"{graph.label(link.source)}  ->  {graph.label(link.target)}"
            f"  |  {format_value(link.value, units)}"
        )
    return 0


def cmd_dot(args: argparse.Namespace, settings: Settings) -> int:
    graph = normalize(load_payload(args.payload))

    overrides: dict[str, Any] = {}
    if args.units is not None:
        overrides["units"] = args.units
    if args.level_order is not None:
        overrides["level_order"] = _split_list(args.level_order)
    if args.rankdir is not None:
        overrides["rankdir"] = args.rankdir
    if args.penwidth_min is not None:
        overrides["penwidth_min"] = args.penwidth_min
    if args.penwidth_scale is not None:
        overrides["penwidth_scale"] = args.penwidth_scale
    if args.color_edges:
        overrides["color_edges_by_source_level"] = True
    if args.no_color_nodes:
        overrides["color_nodes_by_level"] = False

    dot = emit_dot(graph, DotTheme.from_settings(settings.sankey, **overrides))

    if args.out:
        Path(args.out).write_text(dot, encoding="utf-8")
        logger.info(
            "Wrote DOT file",
            path=args.out,
            nodes=len(graph.nodes),
            links=len(graph.links),
        )
    else:
        sys.stdout.write(dot)
    return 0


def cmd_query(args: argparse.Namespace, settings: Settings) -> int:
    names = _split_list(args.dims) or []
    dimensions = []
    for name in names:
        try:
            dimensions.append(Dimension.from_name(name))
        except ValueError:
            logger.warning("Ignoring unknown dimension", dimension=name)

    if args.sankey and len(dimensions) < 2:
        logger.error("Sankey queries need at least two dimensions", dimensions=names)
        return 1

    builder = (
        QueryBuilder.last_minutes(args.minutes or settings.query.lookback_minutes)
        .dimensions(*dimensions)
        .units(args.units or settings.query.units)
        .limit(args.limit or settings.query.limit, args.limit_type or settings.query.limit_type)
        .truncate(args.truncate_v4, args.truncate_v6)
    )
    expr = args.filter if args.filter is not None else settings.query.filter
    if expr:
        builder.filter(expr)

    query = builder.build_sankey() if args.sankey else builder.build()
    print(json.dumps(query, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowsankey",
        description="Shape flow-analytics Sankey payloads for visualization",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    summary = sub.add_parser("summary", help="List the largest links of a payload")
    summary.add_argument("payload", help="Path to a JSON payload, or - for stdin")
    summary.add_argument("--top", type=int, help="Number of links to list")
    summary.add_argument("--units", help="Units for value labels (l3bps, pps, bytes)")
    summary.set_defaults(handler=cmd_summary)

    dot = sub.add_parser("dot", help="Render a payload as Graphviz DOT")
    dot.add_argument("payload", help="Path to a JSON payload, or - for stdin")
    dot.add_argument("--units", help="Units for edge labels (l3bps, pps, bytes)")
    dot.add_argument("--level-order", help="Comma-separated dimension prefixes")
    dot.add_argument("--rankdir", choices=["LR", "RL", "TB", "BT"])
    dot.add_argument("--penwidth-min", type=float)
    dot.add_argument("--penwidth-scale", type=float)
    dot.add_argument("--color-edges", action="store_true", help="Colour edges by source level")
    dot.add_argument("--no-color-nodes", action="store_true", help="Use the default fill for all nodes")
    dot.add_argument("--out", help="Write DOT to this file instead of stdout")
    dot.set_defaults(handler=cmd_dot)

    query = sub.add_parser("query", help="Print a graph query payload as JSON")
    query.add_argument("--dims", required=True, help="Comma-separated dimensions")
    query.add_argument("--minutes", type=int, help="Lookback window in minutes")
    query.add_argument("--filter", help="Filter expression")
    query.add_argument("--units", help="Query units")
    query.add_argument("--limit", type=int)
    query.add_argument("--limit-type", choices=["avg", "max", "sum", "p95"])
    query.add_argument("--truncate-v4", type=int)
    query.add_argument("--truncate-v6", type=int)
    query.add_argument("--sankey", action="store_true", help="Drop line-only fields")
    query.set_defaults(handler=cmd_query)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except pydantic.ValidationError as e:
        print(f"Error: Invalid settings: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.logging)
    set_app_info(version=settings.app_version, environment=settings.environment)

    try:
        return args.handler(args, settings)
    except FlowSankeyError as e:
        logger.error(e.message, error=e.error_code, **e.details)
        return 1
    except OSError as e:
        logger.error("Cannot access file", error=str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
