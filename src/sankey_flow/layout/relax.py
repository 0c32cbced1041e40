"""Vertical node placement by iterative relaxation.

Nodes start stacked at the top of their column in first-seen order. Each
round then runs a forward pass (left to right, nodes move toward the
weighted centre of their incoming bands) and a backward pass (right to
left, toward their outgoing bands). After every pass each column is
swept top-down to remove overlaps and squeezed back into the extent if
the sweep pushed it past the bottom.
"""

from __future__ import annotations

__all__ = ["initial_positions", "relax", "resolve_collisions"]

from collections import defaultdict
from collections.abc import Iterable

from sankey_flow.layout.links import assign_link_endpoints
from sankey_flow.layout.constants import MIN_NODE_HEIGHT
from sankey_flow.layout.sizing import node_height
from sankey_flow.parser.model import FlowGraph, Link, Node


def initial_positions(
    columns: list[list[Node]],
    y_min: float,
    padding: float,
    scale: float,
    floor: float = MIN_NODE_HEIGHT,
) -> None:
    """Stack each column's nodes top-down from y_min."""
    for col in columns:
        y = y_min
        for node in col:
            node.y0 = y
            node.y1 = y + node_height(node, scale, floor)
            y = node.y1 + padding


def relax(
    graph: FlowGraph,
    columns: list[list[Node]],
    y_min: float,
    y_max: float,
    padding: float,
    iterations: int,
) -> None:
    """Run the forward/backward relaxation rounds in place."""
    incoming: dict[int, list[Link]] = defaultdict(list)
    outgoing: dict[int, list[Link]] = defaultdict(list)
    for link in graph.links:
        if link.is_self_link or link.flow <= 0:
            continue
        incoming[link.target].append(link)
        outgoing[link.source].append(link)

    assign_link_endpoints(graph)
    for _ in range(iterations):
        _relax_pass(graph, columns, incoming, forward=True)
        _settle(graph, columns, y_min, y_max, padding)
        _relax_pass(graph, reversed(columns), outgoing, forward=False)
        _settle(graph, columns, y_min, y_max, padding)


def _settle(
    graph: FlowGraph,
    columns: list[list[Node]],
    y_min: float,
    y_max: float,
    padding: float,
) -> None:
    for col in columns:
        resolve_collisions(col, y_min, y_max, padding)
    assign_link_endpoints(graph)


def _relax_pass(
    graph: FlowGraph,
    columns: Iterable[list[Node]],
    adjacency: dict[int, list[Link]],
    forward: bool,
) -> None:
    """Move each node's centre to the flow-weighted mean of its neighbours' bands.

    Band positions are taken relative to the neighbour's current top edge
    so that moves made earlier in the same pass carry downstream.
    """
    nodes = graph.nodes
    if forward:
        offsets = {lk.index: lk.y0 - nodes[lk.source].y0 for lk in graph.links}
    else:
        offsets = {lk.index: lk.y1 - nodes[lk.target].y0 for lk in graph.links}

    for col in columns:
        for node in col:
            links = adjacency.get(node.index)
            if not links:
                continue
            weight = 0.0
            total = 0.0
            for link in links:
                other = nodes[link.source if forward else link.target]
                total += (other.y0 + offsets[link.index]) * link.flow
                weight += link.flow
            shift = total / weight - node.center
            node.y0 += shift
            node.y1 += shift


def resolve_collisions(
    col: list[Node], y_min: float, y_max: float, padding: float
) -> None:
    """Remove overlaps within one column and keep it inside [y_min, y_max].

    Sorts the column by centre (ties keep first-seen order), pushes each
    node below the previous one plus padding, then, if the last node ends
    past y_max, lifts nodes by shrinking the gaps above them.
    """
    if not col:
        return
    col.sort(key=lambda n: (n.center, n.index))

    cursor = y_min
    for node in col:
        if node.y0 < cursor:
            _move(node, cursor - node.y0)
        cursor = node.y1 + padding

    overflow = col[-1].y1 - y_max
    if overflow > 0:
        _compress(col, y_min, padding, overflow)


def _compress(col: list[Node], y_min: float, padding: float, overflow: float) -> None:
    """Lift nodes to absorb *overflow*.

    Slack (space beyond the required padding, plus the space above the
    first node) is taken proportionally from every gap. If that is not
    enough, the padding gaps are shrunk evenly, never below zero.
    """
    slack = [col[0].y0 - y_min] + [
        col[i].y0 - col[i - 1].y1 - padding for i in range(1, len(col))
    ]
    slack = [max(s, 0.0) for s in slack]
    total_slack = sum(slack)

    if total_slack >= overflow:
        ratio = overflow / total_slack
        cut = 0.0
    else:
        ratio = 1.0
        remaining = overflow - total_slack
        cut = min(padding, remaining / (len(col) - 1)) if len(col) > 1 else 0.0

    lift = 0.0
    for i, node in enumerate(col):
        lift += slack[i] * ratio
        if i > 0:
            lift += cut
        _move(node, -lift)


def _move(node: Node, dy: float) -> None:
    node.y0 += dy
    node.y1 += dy
