"""Layout coordinator: combines column assignment, sizing, relaxation and link stacking.

Every call lays out a fresh copy of the graph; the caller's graph is left
untouched so a previous result is never modified by a later relayout.
"""

from __future__ import annotations

import logging

from sankey_flow.layout.constants import (
    DEFAULT_HEIGHT,
    DEFAULT_WIDTH,
    MARGIN_X,
    MARGIN_Y,
    NODE_PADDING,
    NODE_WIDTH,
    RELAX_ITERATIONS,
)
from sankey_flow.layout.layers import assign_columns
from sankey_flow.layout.links import assign_link_endpoints, assign_link_widths
from sankey_flow.layout.relax import initial_positions, relax, resolve_collisions
from sankey_flow.layout.sizing import (
    compute_node_values,
    compute_scale,
    effective_padding,
    height_floor,
)
from sankey_flow.parser.model import Alignment, FlowGraph

logger = logging.getLogger(__name__)


def compute_layout(
    graph: FlowGraph,
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
    node_width: float = NODE_WIDTH,
    node_padding: float = NODE_PADDING,
    alignment: Alignment | str = Alignment.JUSTIFY,
    iterations: int = RELAX_ITERATIONS,
    margin_x: float = MARGIN_X,
    margin_y: float = MARGIN_Y,
) -> FlowGraph:
    """Compute node and link geometry for a flow graph.

    Returns a new FlowGraph carrying columns, node boxes, link widths and
    link band centres in drawing coordinates.
    """
    alignment = Alignment.parse(alignment)
    result = graph.copy()
    x_min, y_min = margin_x, margin_y
    x_max = max(width - margin_x, x_min)
    y_max = max(height - margin_y, y_min)
    result.extent = (x_min, y_min, x_max, y_max)
    result.alignment = alignment

    if result.is_empty:
        result.column_count = 0
        return result

    compute_node_values(result)

    columns_by_node, column_count = assign_columns(result, alignment)
    result.column_count = column_count
    _place_columns(result, columns_by_node, x_min, x_max, node_width)

    columns = result.columns()
    available = y_max - y_min
    floor = height_floor(columns, available)
    padding = effective_padding(columns, available, node_padding, floor)
    scale = compute_scale(columns, available, padding, floor)
    result.node_padding = padding
    result.scale = scale
    result.min_node_height = floor
    assign_link_widths(result, scale)

    initial_positions(columns, y_min, padding, scale, floor)
    for col in columns:
        resolve_collisions(col, y_min, y_max, padding)
    relax(result, columns, y_min, y_max, padding, iterations)
    assign_link_endpoints(result)

    logger.debug(
        "Laid out %d nodes in %d columns (%s, scale=%.4f, padding=%.1f)",
        len(result.nodes), column_count, alignment.value, scale, padding,
    )
    return result


def _place_columns(
    graph: FlowGraph,
    columns_by_node: dict[int, int],
    x_min: float,
    x_max: float,
    node_width: float,
) -> None:
    """Map columns to x positions; the last column sits flush right."""
    max_column = graph.column_count - 1
    node_width = min(node_width, x_max - x_min)
    kx = (x_max - x_min - node_width) / max_column if max_column > 0 else 0.0
    for node in graph.nodes:
        node.column = columns_by_node.get(node.index, 0)
        node.x0 = x_min + node.column * kx
        node.x1 = node.x0 + node_width
