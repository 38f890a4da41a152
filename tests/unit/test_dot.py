"""Unit tests for Graphviz DOT emission."""

import json

import pytest

from flowsankey.common.config import DEFAULT_LEVEL_COLORS, SankeySettings
from flowsankey.sankey.dot import (
    EDGE_COLOR_NEUTRAL,
    DotTheme,
    emit_dot,
    escape,
    penwidth,
)
from flowsankey.sankey.models import CanonicalGraph, CanonicalLink
from flowsankey.sankey.normalizer import normalize


@pytest.fixture
def two_level_graph() -> CanonicalGraph:
    """Graph with one SrcAS node feeding one exporter."""
    return CanonicalGraph(
        nodes=["SrcAS: 15169: Google", "ExporterAddress: 10.0.0.1"],
        links=[CanonicalLink(source=0, target=1, value=1500)],
    )


@pytest.mark.unit
class TestEscape:
    """Test cases for the escape function."""

    def test_quotes_escaped(self):
        """Test double quotes gain a backslash."""
        assert escape('say "hi"') == 'say \\"hi\\"'

    def test_other_characters_untouched(self):
        """Test nothing but quotes is rewritten."""
        assert escape("a\\b{c}<d>;") == "a\\b{c}<d>;"


@pytest.mark.unit
class TestPenwidth:
    """Test cases for the penwidth function."""

    def test_minimum_applies(self):
        """Test small values are clamped to the minimum."""
        assert penwidth(0) == 1
        assert penwidth(9) == 1

    def test_log_scaled(self):
        """Test width grows with log10(value + 1) times scale."""
        assert penwidth(99) == pytest.approx(2.0)
        assert penwidth(99, minimum=1, scale=1.5) == pytest.approx(3.0)

    def test_values_below_domain(self):
        """Test values where log10 is undefined use the minimum."""
        assert penwidth(-1) == 1
        assert penwidth(-50, minimum=2) == 2


@pytest.mark.unit
class TestEmitDot:
    """Test cases for emit_dot function."""

    def test_full_output(self, two_level_graph):
        """Test the complete document for a small graph."""
        dot = emit_dot(two_level_graph, DotTheme(units="l3bps"))

        assert dot == (
            "digraph Sankey {\n"
            "  rankdir=LR;\n"
            '  node [shape=box, style="rounded,filled", fillcolor="#eef5ff", fontname="Inter,Arial"];\n'
            '  n0 [label="SrcAS: 15169: Google", fillcolor="#C7D2FE"];\n'
            '  n1 [label="ExporterAddress: 10.0.0.1", fillcolor="#A7F3D0"];\n'
            '  n0 -> n1 [label="1.50 Kbps", penwidth=3.18, color="#7c8ea3"];\n'
            "}\n"
        )

    def test_deterministic(self, node_link_payload):
        """Test identical inputs produce byte-identical output."""
        graph = normalize(node_link_payload)
        theme = DotTheme(units="bps", level_order=["SrcAS", "ExporterAddress"])

        assert emit_dot(graph, theme) == emit_dot(graph, theme)

    def test_label_quotes_escaped(self):
        """Test quotes in labels never appear unescaped."""
        graph = CanonicalGraph(nodes=['InIfDescription: "uplink"', "B"], links=[])
        dot = emit_dot(graph)

        assert 'label="InIfDescription: \\"uplink\\""' in dot
        assert '"InIfDescription: "uplink""' not in dot

    def test_formatter_output_escaped(self, two_level_graph):
        """Test custom formatter text is escaped too."""
        theme = DotTheme(format_value_label=lambda value, units: f'{value} "flows"')
        dot = emit_dot(two_level_graph, theme)

        assert 'label="1500 \\"flows\\""' in dot

    def test_custom_formatter_receives_units(self, two_level_graph):
        """Test the formatter override is called with value and units."""
        calls = []

        def formatter(value, units):
            calls.append((value, units))
            return "x"

        emit_dot(two_level_graph, DotTheme(units="pps", format_value_label=formatter))
        assert calls == [(1500, "pps")]

    def test_rankdir_and_font(self, two_level_graph):
        """Test layout direction and font are declared in the preamble."""
        dot = emit_dot(two_level_graph, DotTheme(rankdir="TB", fontname='My "Font"'))

        assert "  rankdir=TB;\n" in dot
        assert 'fontname="My \\"Font\\""' in dot

    def test_level_order_colors(self, two_level_graph):
        """Test explicit level order drives node colours."""
        dot = emit_dot(two_level_graph, DotTheme(level_order=["ExporterAddress", "SrcAS"]))

        assert '  n0 [label="SrcAS: 15169: Google", fillcolor="#A7F3D0"];' in dot
        assert '  n1 [label="ExporterAddress: 10.0.0.1", fillcolor="#C7D2FE"];' in dot

    def test_palette_cycles(self):
        """Test levels past the palette wrap around."""
        graph = CanonicalGraph(nodes=["A: 1", "B: 1", "C: 1"], links=[])
        dot = emit_dot(graph, DotTheme(level_colors=("#111111", "#222222")))

        assert 'n2 [label="C: 1", fillcolor="#111111"]' in dot

    def test_unprefixed_nodes_default_fill(self):
        """Test nodes without a level use the default fill."""
        graph = CanonicalGraph(nodes=["Other"], links=[])
        dot = emit_dot(graph, DotTheme(node_fill_default="#ffffff"))

        assert 'n0 [label="Other", fillcolor="#ffffff"]' in dot

    def test_node_colouring_disabled(self, two_level_graph):
        """Test all nodes use the default fill when colouring is off."""
        dot = emit_dot(two_level_graph, DotTheme(color_nodes_by_level=False))

        assert 'n0 [label="SrcAS: 15169: Google", fillcolor="#eef5ff"]' in dot
        assert 'n1 [label="ExporterAddress: 10.0.0.1", fillcolor="#eef5ff"]' in dot

    def test_edges_coloured_by_source_level(self, two_level_graph):
        """Test edge colour follows the source node's level."""
        dot = emit_dot(two_level_graph, DotTheme(color_edges_by_source_level=True))
        assert 'color="#C7D2FE"];' in dot

        dot = emit_dot(two_level_graph)
        assert f'color="{EDGE_COLOR_NEUTRAL}"];' in dot

    def test_penwidth_options(self):
        """Test penwidth minimum and scale are applied and rendered with two decimals."""
        graph = CanonicalGraph(
            nodes=["A", "B"],
            links=[
                CanonicalLink(source=0, target=1, value=99),
                CanonicalLink(source=1, target=0, value=0),
            ],
        )
        dot = emit_dot(graph, DotTheme(penwidth_min=0.5, penwidth_scale=1.5))

        assert 'n0 -> n1 [label="99", penwidth=3.00' in dot
        assert 'n1 -> n0 [label="0", penwidth=0.50' in dot

    def test_non_finite_values_coerced(self):
        """Test non-finite link values are drawn as 0."""
        graph = CanonicalGraph(
            nodes=["A", "B"],
            links=[CanonicalLink(source=0, target=1, value=float("nan"))],
        )
        dot = emit_dot(graph, DotTheme(units="bps"))

        assert 'n0 -> n1 [label="0 bps", penwidth=1.00, color="#7c8ea3"];' in dot

    def test_oversized_integer_payload(self):
        """Test JSON integers beyond float range are drawn as 0."""
        huge = "1" + "0" * 400
        node_link = json.loads(
            '{"nodes": ["A", "B"], "links": [{"source": 0, "target": 1, "value": ' + huge + "}]}"
        )
        rows = json.loads('{"rows": [["A", "B"]], "values": [' + huge + "]}")

        for payload in (node_link, rows):
            dot = emit_dot(normalize(payload), DotTheme(units="bps"))
            assert 'n0 -> n1 [label="0 bps", penwidth=1.00' in dot

    def test_oversized_integer_link_value(self):
        """Test an unnormalized huge integer value does not raise."""
        graph = CanonicalGraph(
            nodes=["A", "B"],
            links=[CanonicalLink(source=0, target=1, value=10**400)],
        )
        dot = emit_dot(graph, DotTheme(units="bps"))

        assert 'n0 -> n1 [label="0 bps", penwidth=1.00' in dot

    def test_empty_palette_does_not_raise(self, two_level_graph):
        """Test an empty palette falls back to the default fill."""
        dot = emit_dot(two_level_graph, DotTheme(level_colors=(), color_edges_by_source_level=True))

        assert 'fillcolor="#C7D2FE"' not in dot
        assert dot.count('"#eef5ff"') == 4

    def test_empty_graph(self):
        """Test a graph without nodes still yields a valid document."""
        dot = emit_dot(CanonicalGraph())

        assert dot.startswith("digraph Sankey {\n")
        assert dot.endswith("}\n")
        assert "->" not in dot

    def test_node_ids_independent_of_labels(self):
        """Test node identifiers use the index, not the label."""
        graph = CanonicalGraph(nodes=["a b: c", "x->y: z"], links=[CanonicalLink(0, 1, 1)])
        dot = emit_dot(graph)

        assert "  n0 -> n1 [" in dot


@pytest.mark.unit
class TestDotTheme:
    """Test cases for DotTheme defaults and settings."""

    def test_defaults(self):
        """Test the default theme values."""
        theme = DotTheme()

        assert theme.penwidth_min == 1
        assert theme.penwidth_scale == 1
        assert tuple(theme.level_colors) == tuple(DEFAULT_LEVEL_COLORS)
        assert theme.node_fill_default == "#eef5ff"
        assert theme.rankdir == "LR"
        assert theme.fontname == "Inter,Arial"
        assert theme.color_nodes_by_level is True
        assert theme.color_edges_by_source_level is False
        assert theme.format_value_label is None

    def test_from_settings_with_overrides(self):
        """Test settings seed the theme and overrides win."""
        settings = SankeySettings(units="pps", rankdir="BT", level_order=["SrcAS"])
        theme = DotTheme.from_settings(settings, rankdir="RL")

        assert theme.units == "pps"
        assert theme.level_order == ["SrcAS"]
        assert theme.rankdir == "RL"
