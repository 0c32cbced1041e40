"""Dark grey theme."""

from sankey_flow.render.style import Theme

DARK_THEME = Theme(
    name="dark",
    background_color="#2b2b2b",
    node_stroke="#1a1a1a",
    node_stroke_width=0.5,
    link_alpha="66",
    label_font_family="'Helvetica Neue', Helvetica, Arial, sans-serif",
    label_font_size=12.0,
    label_color="#e0e0e0",
    title_color="#ffffff",
    palette=(
        "#2db572",
        "#0570b0",
        "#f5c542",
        "#e63946",
        "#9b59b6",
        "#ff9800",
        "#00bcd4",
        "#795548",
    ),
)
