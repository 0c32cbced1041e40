"""Build a flow graph from parallel label/value columns.

Each row (source label, target label, value) becomes one link. Nodes are
deduplicated by exact name and numbered in the order they are first seen,
source label before target label within a row.
"""

from __future__ import annotations

__all__ = ["build_flow_graph", "build_from_rows", "parse_value"]

import logging
import math
import re
from collections.abc import Callable, Iterable, Sequence

from sankey_flow.parser.model import FlowGraph, Link, Node

logger = logging.getLogger(__name__)

ColorLookup = Callable[[str], str]

# Commas are accepted only as thousands separators: "1,200.5" but not "1,5"
_THOUSANDS = re.compile(r"[+-]?\d{1,3}(,\d{3})+(\.\d*)?")


def parse_value(raw: object) -> float | None:
    """Coerce a cell to a finite float, or None if it is not numeric."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if _THOUSANDS.fullmatch(text):
            text = text.replace(",", "")
        try:
            value = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _label(raw: object) -> str:
    return "" if raw is None else str(raw)


def build_flow_graph(
    label_columns: Sequence[Sequence[object]] | None,
    values: Sequence[object] | None,
    color_for: ColorLookup | None = None,
) -> FlowGraph:
    """Build a FlowGraph from category columns and a value column.

    Args:
        label_columns: At least two label sequences; the first holds source
            labels, the second target labels. Extra columns are ignored.
        values: Numeric value per row.
        color_for: Name -> colour lookup. Nodes get an empty colour when
            omitted.

    Insufficient input (fewer than two label columns, no values) yields an
    empty graph. Values that are not numeric become zero-value links.
    """
    graph = FlowGraph()
    if not label_columns or len(label_columns) < 2 or not values:
        logger.debug("Insufficient columns for a flow graph; returning empty graph")
        return graph

    sources, targets = label_columns[0], label_columns[1]
    n_rows = min(len(sources), len(targets), len(values))
    if not len(sources) == len(targets) == len(values):
        logger.warning(
            "Column lengths differ (%d sources, %d targets, %d values); "
            "using the first %d rows",
            len(sources), len(targets), len(values), n_rows,
        )

    for row in range(n_rows):
        src_idx = _resolve_node(graph, _label(sources[row]), color_for)
        tgt_idx = _resolve_node(graph, _label(targets[row]), color_for)

        value = parse_value(values[row])
        if value is None:
            logger.warning(
                "Row %d: value %r is not numeric; treating as 0", row, values[row]
            )
            value = 0.0

        graph.add_link(Link(
            source=src_idx,
            target=tgt_idx,
            value=value,
            color=graph.nodes[tgt_idx].color,
        ))

    logger.debug(
        "Built flow graph: %d nodes, %d links", len(graph.nodes), len(graph.links)
    )
    return graph


def _resolve_node(
    graph: FlowGraph, name: str, color_for: ColorLookup | None
) -> int:
    """Return the index of *name*, appending a new node on first sight."""
    idx = graph.node_index(name)
    if idx is None:
        color = color_for(name) if color_for else ""
        idx = graph.add_node(Node(name=name, color=color))
    return idx


def build_from_rows(
    rows: Iterable[tuple[object, object, object]],
    color_for: ColorLookup | None = None,
) -> FlowGraph:
    """Build a FlowGraph from (source, target, value) triples."""
    sources: list[object] = []
    targets: list[object] = []
    values: list[object] = []
    for source, target, value in rows:
        sources.append(source)
        targets.append(target)
        values.append(value)
    return build_flow_graph([sources, targets], values, color_for)
