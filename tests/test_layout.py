"""Tests for the layout engine."""

import math

import pytest

from sankey_flow.layout.constants import LABEL_GAP, MIN_NODE_HEIGHT
from sankey_flow.layout.engine import compute_layout
from sankey_flow.layout.geometry import export_geometry, link_path
from sankey_flow.layout.labels import place_labels
from sankey_flow.layout.layers import (
    assign_columns,
    flow_digraph,
    node_depths,
    node_heights,
)
from sankey_flow.layout.relax import resolve_collisions
from sankey_flow.layout.sizing import compute_scale, effective_padding, height_floor
from sankey_flow.parser import Alignment, FlowGraph, build_from_rows
from sankey_flow.parser.model import Node


def _scenario_graph():
    return build_from_rows([("A", "X", 10), ("A", "Y", 5), ("B", "X", 3)])


def _chain_graph():
    return build_from_rows([("a", "b", 1), ("b", "c", 1)])


def _diamond_graph():
    return build_from_rows(
        [("a", "b", 1), ("b", "d", 1), ("a", "c", 1), ("c", "d", 1)]
    )


def _uneven_graph():
    """A long chain plus a short branch joining at the end."""
    return build_from_rows(
        [("A", "B", 10), ("B", "C", 10), ("C", "D", 10), ("E", "D", 4)]
    )


def _columns_by_name(graph, alignment):
    columns, _ = assign_columns(graph, alignment)
    return {graph.nodes[i].name: col for i, col in columns.items()}


# --- Column assignment ---


def test_layer_assignment_linear():
    assert _columns_by_name(_chain_graph(), Alignment.LEFT) == {"a": 0, "b": 1, "c": 2}


def test_layer_assignment_branching():
    columns = _columns_by_name(_diamond_graph(), Alignment.LEFT)
    assert columns["a"] == 0
    # b and c both have a as predecessor, so both at column 1
    assert columns["b"] == columns["c"] == 1
    assert columns["d"] == 2


def test_column_count_is_longest_path_plus_one():
    _, count = assign_columns(_uneven_graph(), Alignment.LEFT)
    assert count == 4
    _, count = assign_columns(_scenario_graph(), Alignment.LEFT)
    assert count == 2


def test_depths_and_heights():
    G = flow_digraph(_uneven_graph())
    depths = node_depths(G)
    heights = node_heights(G)
    # nodes: A, B, C, D, E
    assert [depths[i] for i in range(5)] == [0, 1, 2, 3, 0]
    assert [heights[i] for i in range(5)] == [3, 2, 1, 0, 1]


def test_scenario_left_alignment():
    columns = _columns_by_name(_scenario_graph(), Alignment.LEFT)
    assert columns == {"A": 0, "B": 0, "X": 1, "Y": 1}


def test_right_alignment_moves_short_branch():
    left = _columns_by_name(_uneven_graph(), Alignment.LEFT)
    right = _columns_by_name(_uneven_graph(), Alignment.RIGHT)
    assert left["E"] == 0
    assert right["E"] == 2
    # Nodes on the longest path don't move
    for name in "ABCD":
        assert left[name] == right[name]


def test_justify_pulls_sinks_to_last_column():
    graph = build_from_rows([("A", "B", 5), ("B", "C", 3), ("A", "D", 2)])
    left = _columns_by_name(graph, Alignment.LEFT)
    justify = _columns_by_name(graph, Alignment.JUSTIFY)
    assert left["D"] == 1
    assert justify["D"] == 2
    assert justify["C"] == 2


def test_center_alignment_pulls_source_toward_target():
    graph = build_from_rows([("S1", "M", 1), ("M", "T", 1), ("S2", "T", 1)])
    columns = _columns_by_name(graph, Alignment.CENTER)
    assert columns["S2"] == 1
    assert columns["S1"] == 0
    assert columns["T"] == 2


def test_center_alignment_weights_by_value():
    graph = build_from_rows(
        [("A", "B", 1), ("B", "C", 1), ("C", "D", 1), ("A", "E", 1), ("E", "D", 3)]
    )
    left = _columns_by_name(graph, Alignment.LEFT)
    center = _columns_by_name(graph, Alignment.CENTER)
    assert left["E"] == 1
    # Weighted mean of A (column 0, weight 1) and D (column 3, weight 3) is 2.25
    assert center["E"] == 2


def test_center_alignment_keeps_heavy_link_spanning_columns():
    """A and B both drift toward column 1; B must still land right of A."""
    graph = build_from_rows([
        ("P0", "P1", 1), ("P1", "P2", 1), ("P2", "P3", 1), ("P3", "P4", 1),
        ("A", "B", 100), ("B", "P3", 1),
    ])
    center = _columns_by_name(graph, Alignment.CENTER)
    assert center["A"] == 1
    assert center["B"] == 2
    for link in graph.links:
        assert center[graph.nodes[link.source].name] < center[
            graph.nodes[link.target].name
        ]


def test_cycle_terminates():
    graph = build_from_rows([("A", "B", 1), ("B", "C", 1), ("C", "A", 1)])
    for alignment in Alignment:
        columns, count = assign_columns(graph, alignment)
        assert count <= len(graph.nodes)
        assert all(0 <= c < count for c in columns.values())


def test_cycle_behind_source_keeps_prefix_order():
    graph = build_from_rows([("S", "A", 1), ("A", "B", 1), ("B", "A", 1)])
    columns = _columns_by_name(graph, Alignment.LEFT)
    assert columns["S"] == 0
    assert columns["A"] < columns["B"]


def test_self_link_ignored_for_columns():
    graph = build_from_rows([("A", "A", 1), ("A", "B", 1)])
    assert _columns_by_name(graph, Alignment.LEFT) == {"A": 0, "B": 1}


# --- Sizing ---


def _column(*values):
    nodes = []
    for i, value in enumerate(values):
        node = Node(name=f"n{i}", index=i)
        node.value_in = value
        nodes.append(node)
    return nodes


def test_scale_fits_fullest_column():
    columns = [_column(15, 3), _column(13, 5), _column(2)]
    scale = compute_scale(columns, available=100, padding=10)
    assert scale == pytest.approx(90 / 18)


def test_scale_zero_without_flow():
    assert compute_scale([_column(0, 0)], available=100, padding=10) == 0.0


def test_padding_shrinks_for_crowded_column():
    columns = [_column(*([1] * 12))]
    padding = effective_padding(columns, available=100, padding=10)
    assert padding == pytest.approx(100 * 0.5 / 11)
    assert effective_padding([_column(1, 1)], available=100, padding=10) == 10


def test_padding_kept_while_gaps_fit():
    # 30 gaps of 10 need 300 of 590
    columns = [_column(*([1] * 31))]
    assert effective_padding(columns, available=590, padding=10) == 10


def test_padding_kept_in_layout_when_gaps_fit():
    rows = [("Hub", f"T{i:02d}", 1) for i in range(31)]
    graph = compute_layout(build_from_rows(rows), height=600)
    assert graph.node_padding == 10


def test_height_floor_lowered_for_many_flowless_nodes():
    assert height_floor([_column(1, 0, 0)], available=100) == MIN_NODE_HEIGHT
    columns = [_column(1), _column(*([0] * 400))]
    assert height_floor(columns, available=290) == pytest.approx(290 * 0.5 / 400)


def test_many_flowless_nodes_keep_flow_visible():
    rows = [("A", "B", 10)] + [("A", f"Z{i}", 0) for i in range(400)]
    graph = compute_layout(build_from_rows(rows), height=300)
    _, y_min, _, y_max = graph.extent
    assert graph.scale > 0
    assert graph.node("A").height > 0
    assert graph.node("B").height == pytest.approx(10 * graph.scale)
    assert max(n.y1 for n in graph.nodes) <= y_max + 1e-6
    assert min(n.y0 for n in graph.nodes) >= y_min - 1e-6


# --- Collision resolution ---


def _boxes(*spans):
    return [Node(name=f"n{i}", index=i, y0=a, y1=b) for i, (a, b) in enumerate(spans)]


def test_resolve_pushes_overlaps_down():
    col = _boxes((0, 10), (5, 15), (12, 30))
    resolve_collisions(col, y_min=0, y_max=100, padding=2)
    assert [(n.y0, n.y1) for n in col] == [(0, 10), (12, 22), (24, 42)]


def test_resolve_clamps_to_top():
    col = _boxes((-20, -5))
    resolve_collisions(col, y_min=0, y_max=100, padding=2)
    assert (col[0].y0, col[0].y1) == (0, 15)


def test_resolve_shrinks_padding_on_overflow():
    col = _boxes((0, 10), (5, 15), (12, 30))
    resolve_collisions(col, y_min=0, y_max=40, padding=2)
    assert col[0].y0 == pytest.approx(0)
    assert col[-1].y1 == pytest.approx(40)
    gaps = [b.y0 - a.y1 for a, b in zip(col, col[1:])]
    assert gaps == [pytest.approx(1), pytest.approx(1)]


def test_resolve_takes_overflow_from_slack_first():
    col = _boxes((0, 10), (50, 60))
    resolve_collisions(col, y_min=0, y_max=55, padding=2)
    assert (col[0].y0, col[0].y1) == (0, 10)
    assert col[1].y0 == pytest.approx(45)
    assert col[1].y1 == pytest.approx(55)


def test_resolve_orders_by_center_then_index():
    col = _boxes((40, 50), (0, 90), (40, 50))
    resolve_collisions(col, y_min=0, y_max=500, padding=0)
    assert [n.name for n in col] == ["n0", "n1", "n2"]
    assert col[0].y0 == 40
    assert col[1].y0 == 50


# --- Full layout ---


def test_scenario_layout_values():
    graph = compute_layout(_scenario_graph(), alignment=Alignment.LEFT)
    assert graph.node("X").value == 13
    assert graph.node("A").value == 15
    assert graph.node("A").column == graph.node("B").column == 0
    assert graph.node("X").column == graph.node("Y").column == 1


def test_layout_heights_proportional_to_value():
    graph = compute_layout(_scenario_graph(), width=800, height=600)
    available = 600 - 2 * 5
    assert graph.scale == pytest.approx((available - 10) / 18)
    for node in graph.nodes:
        assert node.height == pytest.approx(node.value * graph.scale)


def test_fullest_column_fills_extent():
    graph = compute_layout(_scenario_graph(), width=800, height=600)
    for col in graph.columns():
        top = min(n.y0 for n in col)
        bottom = max(n.y1 for n in col)
        assert top == pytest.approx(5)
        assert bottom == pytest.approx(595)


def test_horizontal_positions():
    graph = compute_layout(_chain_graph(), width=400, height=200, node_width=20)
    xs = [(n.x0, n.x1) for n in graph.nodes]
    assert xs[0][0] == pytest.approx(1)
    assert xs[-1][1] == pytest.approx(399)
    # Columns are evenly spaced
    assert xs[1][0] - xs[0][0] == pytest.approx(xs[2][0] - xs[1][0])


def test_single_column_layout():
    graph = compute_layout(build_from_rows([("A", "A", 3)]), width=300, height=100)
    assert graph.column_count == 1
    assert graph.nodes[0].x0 == pytest.approx(1)


def test_zero_valued_nodes_get_height_floor():
    graph = compute_layout(build_from_rows([("A", "B", 0)]))
    assert all(n.height == pytest.approx(MIN_NODE_HEIGHT) for n in graph.nodes)
    assert graph.links[0].width == 0


def test_negative_value_link_is_degenerate():
    graph = compute_layout(build_from_rows([("A", "B", 4), ("A", "C", -2)]))
    assert graph.links[1].width == 0
    assert graph.node("A").value == 4


def test_relaxation_untangles_crossing():
    rows = [("S", "X", 1), ("A", "Y", 5), ("B", "X", 5)]
    stacked = compute_layout(build_from_rows(rows), iterations=0)
    relaxed = compute_layout(build_from_rows(rows), iterations=6)
    assert stacked.node("X").center < stacked.node("Y").center
    assert relaxed.node("Y").center < relaxed.node("X").center


def test_link_bands_stack_from_node_top():
    graph = compute_layout(_scenario_graph(), alignment=Alignment.LEFT)
    a = graph.node("A")
    out = sorted(graph.outgoing(a.index), key=lambda lk: lk.y0)
    assert out[0].y0 - out[0].width / 2 == pytest.approx(a.y0)
    assert out[1].y0 - out[1].width / 2 == pytest.approx(out[0].y0 + out[0].width / 2)
    x = graph.node("X")
    incoming = sorted(graph.incoming(x.index), key=lambda lk: lk.y1)
    sources = [graph.nodes[lk.source].center for lk in incoming]
    assert sources == sorted(sources)


def test_link_width_monotonic_in_value():
    graph = compute_layout(_scenario_graph())
    by_value = sorted(graph.links, key=lambda lk: lk.value)
    widths = [lk.width for lk in by_value]
    assert widths == sorted(widths)
    assert graph.links[0].width == pytest.approx(10 * graph.scale)


def test_layout_does_not_mutate_input():
    graph = _scenario_graph()
    result = compute_layout(graph)
    assert result is not graph
    assert all(n.y0 == 0 and n.y1 == 0 for n in graph.nodes)
    assert all(lk.width == 0 for lk in graph.links)


def test_relayout_leaves_previous_result_alone():
    graph = _uneven_graph()
    left = compute_layout(graph, alignment=Alignment.LEFT)
    before = export_geometry(left).to_dict()
    right = compute_layout(graph, alignment=Alignment.RIGHT)
    assert export_geometry(left).to_dict() == before
    assert left.node("E").column != right.node("E").column
    assert [n.name for n in left.nodes] == [n.name for n in right.nodes]
    assert [(lk.source, lk.target) for lk in left.links] == [
        (lk.source, lk.target) for lk in right.links
    ]


def test_layout_is_deterministic():
    rows = [("A", "X", 10), ("A", "Y", 5), ("B", "X", 3), ("X", "Z", 13), ("Y", "Z", 1)]
    first = export_geometry(compute_layout(build_from_rows(rows), alignment="center"))
    second = export_geometry(compute_layout(build_from_rows(rows), alignment="center"))
    assert first.to_dict() == second.to_dict()


def test_empty_graph_layout():
    graph = compute_layout(FlowGraph())
    assert graph.is_empty
    assert graph.column_count == 0
    geometry = export_geometry(graph)
    assert geometry.is_empty
    assert geometry.links == []


def test_alignment_recorded():
    graph = compute_layout(_scenario_graph(), alignment="right")
    assert graph.alignment is Alignment.RIGHT


def test_unknown_alignment_rejected():
    with pytest.raises(ValueError):
        compute_layout(_scenario_graph(), alignment="diagonal")


# --- Geometry and labels ---


def test_link_path_is_horizontal_cubic():
    graph = compute_layout(_scenario_graph())
    link = graph.links[0]
    start, c1, c2, end = link_path(graph, link)
    assert start == (graph.node("A").x1, link.y0)
    assert end == (graph.node("X").x0, link.y1)
    assert c1[0] == c2[0] == pytest.approx((start[0] + end[0]) / 2)
    assert c1[1] == start[1]
    assert c2[1] == end[1]


def test_export_geometry_records():
    graph = compute_layout(_scenario_graph(), width=500, height=300)
    geometry = export_geometry(graph)
    assert (geometry.width, geometry.height) == (500, 300)
    assert [n.name for n in geometry.nodes] == ["A", "X", "Y", "B"]
    a = geometry.nodes[0]
    assert a.value == 15
    assert a.width == pytest.approx(15)
    assert a.height == pytest.approx(graph.node("A").height)
    link = geometry.links[0]
    assert (link.source, link.target, link.value) == ("A", "X", 10)
    assert len(link.path) == 4
    data = geometry.to_dict()
    assert data["nodes"][0]["name"] == "A"
    assert data["alignment"] == "justify"


def test_labels_face_into_diagram():
    graph = compute_layout(_scenario_graph(), width=800, height=600)
    labels = {lbl.text: lbl for lbl in place_labels(graph)}
    a = graph.node("A")
    x = graph.node("X")
    assert labels["A"].text_anchor == "start"
    assert labels["A"].x == pytest.approx(a.x1 + LABEL_GAP)
    assert labels["X"].text_anchor == "end"
    assert labels["X"].x == pytest.approx(x.x0 - LABEL_GAP)
    assert labels["X"].y == pytest.approx(x.center)
    assert not labels["X"].right_of_node


def test_no_nan_geometry_on_tiny_canvas():
    graph = compute_layout(_uneven_graph(), width=10, height=10)
    for node in graph.nodes:
        assert all(math.isfinite(v) for v in (node.x0, node.x1, node.y0, node.y1))
