"""Data model for flow graphs."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class Alignment(Enum):
    """Column assignment policy for nodes not pinned by a longest path."""

    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"
    JUSTIFY = "justify"

    @classmethod
    def parse(cls, name: str | Alignment) -> Alignment:
        """Look up an alignment by name (case-insensitive)."""
        if isinstance(name, Alignment):
            return name
        try:
            return cls(name.strip().lower())
        except ValueError:
            choices = ", ".join(a.value for a in cls)
            raise ValueError(
                f"Unknown alignment '{name}'. Expected one of: {choices}"
            ) from None


@dataclass
class Node:
    """A distinct category in the flow graph."""

    name: str
    color: str = ""
    index: int = 0
    # Populated by layout engine
    column: int = 0
    x0: float = 0.0
    x1: float = 0.0
    y0: float = 0.0
    y1: float = 0.0
    value_in: float = 0.0
    value_out: float = 0.0

    @property
    def value(self) -> float:
        return max(self.value_in, self.value_out)

    @property
    def height(self) -> float:
        return self.y1 - self.y0

    @property
    def center(self) -> float:
        return (self.y0 + self.y1) / 2


@dataclass
class Link:
    """A directed flow between two nodes, one per input row."""

    source: int
    target: int
    value: float
    color: str = ""
    index: int = 0
    # Populated by layout engine
    width: float = 0.0
    y0: float = 0.0  # band centre at the source node
    y1: float = 0.0  # band centre at the target node

    @property
    def flow(self) -> float:
        """Value used for sizing; non-positive links carry no flow."""
        return self.value if self.value > 0 else 0.0

    @property
    def is_self_link(self) -> bool:
        return self.source == self.target


@dataclass
class FlowGraph:
    """Complete flow graph: ordered nodes and the links between them."""

    nodes: list[Node] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    # Drawing extent (x_min, y_min, x_max, y_max), set by layout engine
    extent: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    alignment: Alignment | None = None
    column_count: int = 0
    node_padding: float = 0.0
    scale: float = 0.0  # pixels per unit of flow
    # Height given to nodes that carry no flow
    min_node_height: float = 0.0
    _index: dict[str, int] = field(default_factory=dict, repr=False)

    def add_node(self, node: Node) -> int:
        """Append a node and return its index."""
        node.index = len(self.nodes)
        self.nodes.append(node)
        self._index[node.name] = node.index
        return node.index

    def add_link(self, link: Link) -> None:
        for idx in (link.source, link.target):
            if not 0 <= idx < len(self.nodes):
                raise IndexError(
                    f"Link references node {idx}, graph has {len(self.nodes)} nodes"
                )
        link.index = len(self.links)
        self.links.append(link)

    def node_index(self, name: str) -> int | None:
        """Return the index of the node with this name, or None."""
        return self._index.get(name)

    def node(self, name: str) -> Node:
        return self.nodes[self._index[name]]

    def incoming(self, idx: int) -> list[Link]:
        """Return links whose target is node *idx*, in link order."""
        return [link for link in self.links if link.target == idx]

    def outgoing(self, idx: int) -> list[Link]:
        """Return links whose source is node *idx*, in link order."""
        return [link for link in self.links if link.source == idx]

    def columns(self) -> list[list[Node]]:
        """Group nodes by column, each column in node index order."""
        result: list[list[Node]] = [[] for _ in range(self.column_count)]
        for node in self.nodes:
            result[node.column].append(node)
        return result

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def copy(self) -> FlowGraph:
        """Return an independent copy with fresh Node and Link objects."""
        return FlowGraph(
            nodes=[replace(n) for n in self.nodes],
            links=[replace(lk) for lk in self.links],
            extent=self.extent,
            alignment=self.alignment,
            column_count=self.column_count,
            node_padding=self.node_padding,
            scale=self.scale,
            min_node_height=self.min_node_height,
            _index=dict(self._index),
        )
