"""SVG rendering for laid-out flow graphs."""

from sankey_flow.render.palette import ColorPalette
from sankey_flow.render.svg import render_svg

__all__ = ["ColorPalette", "render_svg"]
