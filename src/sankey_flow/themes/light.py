"""Light theme: transparent background, labels in their node's colour."""

from sankey_flow.render.style import Theme

LIGHT_THEME = Theme(
    name="light",
    background_color="none",
    node_stroke="none",
    node_stroke_width=0.0,
    link_alpha="40",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=12.0,
)
