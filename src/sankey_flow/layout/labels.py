"""Label placement for node names.

Labels sit beside their node, vertically centred: to the right of nodes
in the left half of the diagram and to the left of nodes in the right
half, so text always points into the diagram.
"""

from __future__ import annotations

from dataclasses import dataclass

from sankey_flow.layout.constants import LABEL_GAP
from sankey_flow.parser.model import FlowGraph


@dataclass
class LabelPlacement:
    """Placement information for a node label."""

    node_index: int
    text: str
    x: float
    y: float
    text_anchor: str = "start"

    @property
    def right_of_node(self) -> bool:
        return self.text_anchor == "start"


def place_labels(
    graph: FlowGraph,
    width: float | None = None,
    gap: float = LABEL_GAP,
) -> list[LabelPlacement]:
    """Place one label per node.

    Args:
        graph: A laid-out graph.
        width: Drawing width whose midline splits left from right labels.
            Defaults to the layout extent plus its margins.
        gap: Horizontal distance between node edge and text.
    """
    if width is None:
        x_min, _, x_max, _ = graph.extent
        width = x_max + x_min
    midline = width / 2

    placements: list[LabelPlacement] = []
    for node in graph.nodes:
        if (node.x0 + node.x1) / 2 < midline:
            x, anchor = node.x1 + gap, "start"
        else:
            x, anchor = node.x0 - gap, "end"
        placements.append(LabelPlacement(
            node_index=node.index,
            text=node.name,
            x=x,
            y=node.center,
            text_anchor=anchor,
        ))
    return placements
