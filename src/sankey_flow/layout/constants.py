"""Layout constants used across layout modules.

Centralizes magic numbers from engine.py, layers.py, sizing.py, relax.py
and labels.py.
"""

# ---------------------------------------------------------------------------
# Node geometry defaults (used as function parameter defaults)
# ---------------------------------------------------------------------------
NODE_WIDTH: float = 15.0
"""Horizontal thickness of a node box."""

NODE_PADDING: float = 10.0
"""Vertical gap between nodes in the same column."""

MIN_NODE_HEIGHT: float = 1.0
"""Height floor for nodes that carry no flow (isolated or zero-valued)."""

MAX_FLOOR_SHARE: float = 0.5
"""Largest fraction of a column's height that flowless node floors may take."""

MAX_PADDING_SHARE: float = 0.5
"""Largest fraction of a crowded column's height that node gaps may take."""

# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------
DEFAULT_WIDTH: float = 800.0
"""Default drawing width in pixels."""

DEFAULT_HEIGHT: float = 600.0
"""Default drawing height in pixels."""

MARGIN_X: float = 1.0
"""Horizontal inset of the layout extent from the drawing edge."""

MARGIN_Y: float = 5.0
"""Vertical inset of the layout extent from the drawing edge."""

# ---------------------------------------------------------------------------
# Relaxation
# ---------------------------------------------------------------------------
RELAX_ITERATIONS: int = 6
"""Number of forward/backward relaxation rounds."""

# ---------------------------------------------------------------------------
# Center alignment
# ---------------------------------------------------------------------------
CENTER_MAX_ITERATIONS: int = 100
"""Upper bound on weighted-average sweeps for center alignment."""

CENTER_TOLERANCE: float = 1e-3
"""Largest column change (in columns) that counts as converged."""

# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------
LABEL_GAP: float = 6.0
"""Horizontal gap between a node edge and its label."""