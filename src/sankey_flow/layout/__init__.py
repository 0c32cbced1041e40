"""Flow layout: columns, node sizing, relaxation and link stacking."""

from sankey_flow.layout.engine import compute_layout
from sankey_flow.layout.geometry import Geometry, export_geometry

__all__ = ["Geometry", "compute_layout", "export_geometry"]
