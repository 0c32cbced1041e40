"""Node values and the global value-to-pixel scale."""

from __future__ import annotations

__all__ = [
    "compute_node_values",
    "compute_scale",
    "effective_padding",
    "height_floor",
    "node_height",
]

from sankey_flow.layout.constants import (
    MAX_FLOOR_SHARE,
    MAX_PADDING_SHARE,
    MIN_NODE_HEIGHT,
)
from sankey_flow.parser.model import FlowGraph, Node


def compute_node_values(graph: FlowGraph) -> None:
    """Set value_in/value_out on every node from its links' flow."""
    for node in graph.nodes:
        node.value_in = 0.0
        node.value_out = 0.0
    for link in graph.links:
        graph.nodes[link.source].value_out += link.flow
        graph.nodes[link.target].value_in += link.flow


def _flowless(col: list[Node]) -> int:
    return sum(1 for n in col if n.value <= 0)


def height_floor(columns: list[list[Node]], available: float) -> float:
    """Height for nodes without flow.

    MIN_NODE_HEIGHT, lowered where a column holds so many flowless nodes
    that their floors would take more than MAX_FLOOR_SHARE of its height.
    """
    floor = MIN_NODE_HEIGHT
    for col in columns:
        count = _flowless(col)
        if count:
            floor = min(floor, max(available, 0.0) * MAX_FLOOR_SHARE / count)
    return floor


def effective_padding(
    columns: list[list[Node]],
    available: float,
    padding: float,
    floor: float = MIN_NODE_HEIGHT,
) -> float:
    """Shrink padding when a column cannot fit its gaps.

    Padding is kept as configured while every column's gaps fit in the
    room left after its height floors. Otherwise the gaps of the most
    crowded column are limited to MAX_PADDING_SHARE of that room, so its
    flows still show.
    """
    padding = max(padding, 0.0)
    for col in columns:
        gaps = len(col) - 1
        if gaps < 1:
            continue
        room = max(available - _flowless(col) * floor, 0.0)
        if gaps * padding >= room:
            padding = min(padding, room * MAX_PADDING_SHARE / gaps)
    return padding


def compute_scale(
    columns: list[list[Node]],
    available: float,
    padding: float,
    floor: float = MIN_NODE_HEIGHT,
) -> float:
    """Pick the pixels-per-unit factor that makes the fullest column fit.

    The column whose values plus gaps need the most room fills the
    available height exactly; every other column uses the same factor so
    heights are comparable across columns. Columns carrying no flow do
    not constrain the scale; if no column carries flow the scale is 0.
    """
    scale: float | None = None
    for col in columns:
        total = sum(n.value for n in col)
        if total <= 0:
            continue
        room = available - (len(col) - 1) * padding - _flowless(col) * floor
        ky = max(room, 0.0) / total
        scale = ky if scale is None else min(scale, ky)
    return scale if scale is not None else 0.0


def node_height(node: Node, scale: float, floor: float = MIN_NODE_HEIGHT) -> float:
    """Pixel height for a node; flowless nodes get the height floor."""
    if node.value <= 0:
        return floor
    return node.value * scale
