"""Theme and style constants for flow diagram rendering."""

from __future__ import annotations

from dataclasses import dataclass, field

from sankey_flow.render.constants import DEFAULT_PALETTE


@dataclass
class Theme:
    """Visual theme for a flow diagram."""

    name: str
    background_color: str
    node_stroke: str
    node_stroke_width: float
    link_alpha: str  # two hex digits appended to the link colour
    label_font_family: str
    label_font_size: float
    # Empty label colour means labels take their node's colour
    label_color: str = ""
    title_color: str = "#333333"
    title_font_size: float = 18.0
    palette: tuple[str, ...] = field(default=DEFAULT_PALETTE)
