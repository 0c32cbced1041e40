"""Render constants used across render modules.

Theme-dependent values remain in style.py.
"""

# ---------------------------------------------------------------------------
# Colours
# ---------------------------------------------------------------------------
DEFAULT_PALETTE: tuple[str, ...] = (
    "#118dff",  # blue
    "#12239e",  # navy
    "#e66c37",  # orange
    "#6b007b",  # purple
    "#e044a7",  # pink
    "#744ec2",  # violet
    "#d9b300",  # yellow
    "#d64550",  # red
    "#197278",  # teal
    "#1aab40",  # green
)
"""Colours handed out to node names in first-request order."""

FALLBACK_COLOR: str = "#888888"
"""Colour used for nodes and links with no colour assigned."""

FALLBACK_LINK_COLOR: str = "#000000"
"""Stroke colour for links with no colour assigned."""

# ---------------------------------------------------------------------------
# SVG drawing
# ---------------------------------------------------------------------------
MIN_LINK_STROKE: float = 1.0
"""Thinnest stroke drawn for a link, so degenerate links stay visible."""

TITLE_Y_OFFSET: float = 20.0
"""Y position for the title text."""

TITLE_X_OFFSET: float = 8.0
"""X position for the title text."""
