"""Input parsing: tables and rows into flow graphs."""

from sankey_flow.parser.model import Alignment, FlowGraph, Link, Node
from sankey_flow.parser.rows import build_flow_graph, build_from_rows
from sankey_flow.parser.table import FlowTable, read_flow_table

__all__ = [
    "Alignment",
    "FlowGraph",
    "FlowTable",
    "Link",
    "Node",
    "build_flow_graph",
    "build_from_rows",
    "read_flow_table",
]
