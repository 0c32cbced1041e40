"""Name -> colour lookup handing out palette colours in first-request order."""

from __future__ import annotations

__all__ = ["ColorPalette"]

from collections.abc import Sequence

from sankey_flow.render.constants import DEFAULT_PALETTE


class ColorPalette:
    """Stable colour per name, cycling through a fixed palette.

    The first name asked for gets the first colour, the next new name the
    second, and so on; asking again for a known name returns the same
    colour. Instances are callable so they can be passed straight to the
    graph builder as its colour lookup.
    """

    def __init__(self, colors: Sequence[str] = DEFAULT_PALETTE) -> None:
        if not colors:
            raise ValueError("Palette needs at least one colour")
        self._colors = tuple(colors)
        self._assigned: dict[str, str] = {}

    def get_color(self, name: str) -> str:
        color = self._assigned.get(name)
        if color is None:
            color = self._colors[len(self._assigned) % len(self._colors)]
            self._assigned[name] = color
        return color

    __call__ = get_color

    def __len__(self) -> int:
        return len(self._assigned)
