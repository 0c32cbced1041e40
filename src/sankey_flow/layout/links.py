"""Link band assignment along node edges.

Links leaving a node are stacked top-down along its right edge in the
order of their targets' vertical centres; links entering a node are
stacked along its left edge in the order of their sources' centres. This
keeps bands adjacent to a shared node from crossing each other.
"""

from __future__ import annotations

__all__ = ["assign_link_widths", "assign_link_endpoints"]

from collections import defaultdict

from sankey_flow.parser.model import FlowGraph, Link


def assign_link_widths(graph: FlowGraph, scale: float) -> None:
    """Set each link's pixel width from its flow."""
    for link in graph.links:
        link.width = link.flow * scale


def assign_link_endpoints(graph: FlowGraph) -> None:
    """Set link.y0 / link.y1 to the band centres at source and target."""
    outgoing: dict[int, list[Link]] = defaultdict(list)
    incoming: dict[int, list[Link]] = defaultdict(list)
    for link in graph.links:
        outgoing[link.source].append(link)
        incoming[link.target].append(link)

    nodes = graph.nodes
    for idx, links in outgoing.items():
        links.sort(key=lambda lk: (nodes[lk.target].center, lk.target, lk.index))
        y = nodes[idx].y0
        for link in links:
            link.y0 = y + link.width / 2
            y += link.width

    for idx, links in incoming.items():
        links.sort(key=lambda lk: (nodes[lk.source].center, lk.source, lk.index))
        y = nodes[idx].y0
        for link in links:
            link.y1 = y + link.width / 2
            y += link.width
