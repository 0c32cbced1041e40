"""Column assignment for flow layout (X-coordinate positioning).

Uses longest-path layering on a topological sort so that, under left
alignment, every link goes from a lower column to a higher column. The
other alignment policies start from the same forward/backward distances.
"""

from __future__ import annotations

__all__ = ["assign_columns", "flow_digraph", "node_depths", "node_heights"]

import logging
import math

import networkx as nx

from sankey_flow.layout.constants import CENTER_MAX_ITERATIONS, CENTER_TOLERANCE
from sankey_flow.parser.model import Alignment, FlowGraph

logger = logging.getLogger(__name__)


def flow_digraph(graph: FlowGraph) -> nx.MultiDiGraph:
    """Build the adjacency used for layering.

    Nodes are node indices, one edge per link keyed by link index and
    weighted by its flow. Self links are left out: they span no columns.
    """
    G = nx.MultiDiGraph()
    G.add_nodes_from(range(len(graph.nodes)))
    for link in graph.links:
        if link.is_self_link:
            continue
        G.add_edge(link.source, link.target, key=link.index, weight=link.flow)
    return G


def node_depths(G: nx.MultiDiGraph) -> dict[int, int]:
    """Longest distance from any source (node without incoming links).

    Each node's depth is 1 + the maximum depth of its predecessors. When
    the graph has a cycle the topological sort is unavailable and the
    capped frontier propagation takes over.
    """
    try:
        topo_order = list(nx.topological_sort(G))
    except nx.NetworkXUnfeasible:
        logger.warning(
            "Flow graph contains a cycle; column assignment is approximate"
        )
        return _capped_depths(G)

    depths: dict[int, int] = {}
    for node in topo_order:
        preds = list(G.predecessors(node))
        if not preds:
            depths[node] = 0
        else:
            depths[node] = max(depths[p] for p in preds) + 1
    return depths


def node_heights(G: nx.MultiDiGraph) -> dict[int, int]:
    """Longest distance to any sink (node without outgoing links)."""
    return node_depths(G.reverse(copy=False))


def _capped_depths(G: nx.MultiDiGraph) -> dict[int, int]:
    """Frontier propagation that stops after as many steps as there are nodes.

    The frontier starts at the sources, plus the lowest-numbered node of
    any component that has no source (a component that is one big cycle).
    Each step moves the frontier to the successors of the current one;
    the cap ends the walk around a cycle and nodes on it keep the last
    distance they were reached at.
    """
    n = G.number_of_nodes()
    depths = dict.fromkeys(G.nodes, 0)
    seeds = {node for node in G.nodes if G.in_degree(node) == 0}
    for component in nx.weakly_connected_components(G):
        if not component & seeds:
            seeds.add(min(component))
    current = sorted(seeds)
    step = 0
    while current:
        for node in current:
            depths[node] = step
        step += 1
        if step >= n:
            break
        # dict keeps the frontier in first-reached order
        frontier: dict[int, None] = {}
        for node in current:
            for succ in G.successors(node):
                frontier[succ] = None
        current = list(frontier)
    return depths


def assign_columns(
    graph: FlowGraph, alignment: Alignment = Alignment.JUSTIFY
) -> tuple[dict[int, int], int]:
    """Assign each node a column under the given alignment policy.

    Returns (node_index -> column, column_count). The column count is the
    longest source-to-sink path length + 1, or 0 for an empty graph.
    """
    if not graph.nodes:
        return {}, 0

    G = flow_digraph(graph)
    depths = node_depths(G)
    column_count = max(depths.values()) + 1
    max_column = column_count - 1

    if alignment is Alignment.LEFT:
        columns = dict(depths)
    elif alignment is Alignment.RIGHT:
        heights = node_heights(G)
        columns = {n: max(0, max_column - heights[n]) for n in G.nodes}
    elif alignment is Alignment.JUSTIFY:
        # Sinks go to the last column so short branches don't dangle mid-diagram
        columns = {
            n: depths[n] if G.out_degree(n) else max_column for n in G.nodes
        }
    else:
        columns = _center_columns(G, depths, node_heights(G), max_column)

    return columns, column_count


def _center_columns(
    G: nx.MultiDiGraph,
    depths: dict[int, int],
    heights: dict[int, int],
    max_column: int,
) -> dict[int, int]:
    """Pull nodes with slack toward the weighted mean of their neighbours.

    A node can sit anywhere between its left column (depth) and its right
    column (max_column - height) without reversing a link. Nodes whose two
    bounds agree lie on a longest path and stay put; the rest are moved to
    the flow-weighted average column of their neighbours, clamped to their
    own window, until no node moves by more than CENTER_TOLERANCE.
    """
    lo = {n: depths[n] for n in G.nodes}
    hi = {n: max(lo[n], max_column - heights[n]) for n in G.nodes}
    pos = {n: float(lo[n]) for n in G.nodes}
    free = [n for n in G.nodes if lo[n] != hi[n]]

    for _ in range(CENTER_MAX_ITERATIONS):
        delta = 0.0
        for node in free:
            neighbours = [
                (v, w) for _, v, w in G.out_edges(node, data="weight")
            ] + [
                (u, w) for u, _, w in G.in_edges(node, data="weight")
            ]
            if not neighbours:
                continue
            total_weight = sum(w for _, w in neighbours)
            if total_weight > 0:
                target = sum(pos[v] * w for v, w in neighbours) / total_weight
            else:
                target = sum(pos[v] for v, _ in neighbours) / len(neighbours)
            target = min(max(target, lo[node]), hi[node])
            delta = max(delta, abs(target - pos[node]))
            pos[node] = target
        if delta < CENTER_TOLERANCE:
            break

    columns = {
        n: min(max(math.floor(pos[n] + 0.5), 0), max_column) for n in G.nodes
    }
    # Rounding neighbours independently can put both ends of a link in
    # one column; push targets right, within their window. Cyclic graphs
    # have no consistent order and keep the rounded columns.
    if not nx.is_directed_acyclic_graph(G):
        return columns
    for node in nx.topological_sort(G):
        preds = [columns[p] for p in G.predecessors(node)]
        if preds:
            columns[node] = min(max(columns[node], max(preds) + 1), hi[node])
    return columns
