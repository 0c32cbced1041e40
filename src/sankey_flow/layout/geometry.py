"""Pixel-ready geometry for renderers.

Flattens a laid-out FlowGraph into plain records: one per node (box,
colour, name, value) and one per link (endpoints, band width, colour,
and the control points of a horizontal cubic connector).
"""

from __future__ import annotations

__all__ = ["Geometry", "LinkGeometry", "NodeGeometry", "export_geometry", "link_path"]

from dataclasses import asdict, dataclass, field

from sankey_flow.parser.model import FlowGraph, Link


@dataclass
class NodeGeometry:
    name: str
    column: int
    x: float
    y: float
    width: float
    height: float
    color: str
    value: float


@dataclass
class LinkGeometry:
    source: str
    target: str
    value: float
    x0: float
    y0: float
    x1: float
    y1: float
    width: float
    color: str
    path: tuple[tuple[float, float], ...] = ()


@dataclass
class Geometry:
    """Complete drawable layout."""

    width: float
    height: float
    alignment: str = ""
    nodes: list[NodeGeometry] = field(default_factory=list)
    links: list[LinkGeometry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def to_dict(self) -> dict:
        return asdict(self)


def link_path(graph: FlowGraph, link: Link) -> tuple[tuple[float, float], ...]:
    """Return (start, control1, control2, end) of the link's connector.

    The curve leaves the source's right edge and enters the target's left
    edge horizontally, bending at the horizontal midpoint.
    """
    x0 = graph.nodes[link.source].x1
    x1 = graph.nodes[link.target].x0
    xm = (x0 + x1) / 2
    return ((x0, link.y0), (xm, link.y0), (xm, link.y1), (x1, link.y1))


def export_geometry(
    graph: FlowGraph, width: float | None = None, height: float | None = None
) -> Geometry:
    """Convert a laid-out graph into renderer-facing records.

    width/height default to the layout extent plus its margins.
    """
    x_min, y_min, x_max, y_max = graph.extent
    geometry = Geometry(
        width=width if width is not None else x_max + x_min,
        height=height if height is not None else y_max + y_min,
        alignment=graph.alignment.value if graph.alignment else "",
    )
    for node in graph.nodes:
        geometry.nodes.append(NodeGeometry(
            name=node.name,
            column=node.column,
            x=node.x0,
            y=node.y0,
            width=node.x1 - node.x0,
            height=node.height,
            color=node.color,
            value=node.value,
        ))
    for link in graph.links:
        path = link_path(graph, link)
        geometry.links.append(LinkGeometry(
            source=graph.nodes[link.source].name,
            target=graph.nodes[link.target].name,
            value=link.value,
            x0=path[0][0],
            y0=link.y0,
            x1=path[-1][0],
            y1=link.y1,
            width=link.width,
            color=link.color,
            path=path,
        ))
    return geometry
